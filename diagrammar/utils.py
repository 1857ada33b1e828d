# -*- coding: utf-8 -*-

""" diagrammar utility functions. """

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Generic, Optional, Type, TypeVar

from diagrammar import messages


def factory_name(cls: type) -> str:
    """
    Returns a string describing a diagrammar class.

    Example
    -------
    >>> from diagrammar.cat import NamedMorphism
    >>> assert factory_name(NamedMorphism) == "cat.NamedMorphism"
    >>> assert factory_name(int) == "int"
    """
    module = cls.__module__.removeprefix('diagrammar.')
    return f"{module}.{cls.__name__}".removeprefix('builtins.')


def from_tree(tree: dict):
    """
    Import diagrammar and decode a serialised object.

    Parameters:
        tree : The serialisation of a diagrammar object.

    Example
    -------
    >>> from diagrammar.cat import Ob
    >>> assert from_tree({'factory': 'cat.Ob', 'name': 'A'}) == Ob('A')
    """
    *modules, factory = tree['factory'].removeprefix('diagrammar.').split('.')
    import diagrammar
    module = diagrammar
    for attr in modules:
        module = getattr(module, attr)
    return getattr(module, factory).from_tree(tree)


def dumps(obj, **kwargs):
    """
    Serialise a diagrammar object as JSON.

    Parameters:
        obj : The diagrammar object to serialise.
        kwargs : Passed to ``json.dumps``.

    Example
    -------
    >>> from diagrammar.cat import NamedMorphism
    >>> print(dumps(NamedMorphism('f', 'A', 'B')))
    ... # doctest: +NORMALIZE_WHITESPACE
    {"factory": "cat.NamedMorphism", "name": "f",
     "dom": {"factory": "cat.Ob", "name": "A"},
     "cod": {"factory": "cat.Ob", "name": "B"}}
    """
    return json.dumps(obj.to_tree(), **kwargs)


def loads(raw):
    """
    Loads a serialised diagrammar object.

    Example
    -------
    >>> raw = '{"factory": "cat.Ob", "name": "A"}'
    >>> from diagrammar.cat import Ob
    >>> assert loads(raw) == Ob('A')
    >>> assert dumps(loads(raw)) == raw
    """
    obj = json.loads(raw)
    if isinstance(obj, list):
        return [from_tree(o) for o in obj]
    return from_tree(obj)


def assert_isinstance(object_, cls: type | tuple[type, ...]):
    """ Raise ``TypeError`` if ``object`` is not instance of ``cls``. """
    classes = cls if isinstance(cls, tuple) else (cls, )
    cls_name = ' | '.join(map(factory_name, classes))
    if not any(isinstance(object_, cls) for cls in classes):
        raise TypeError(messages.TYPE_ERROR.format(
            cls_name, factory_name(type(object_))))


T = TypeVar('T')


class Composable(ABC, Generic[T]):
    """
    Abstract class implementing the syntactic sugar :code:`>>` and :code:`<<`
    for forward and backward composition with some method :code:`then`.

    Example
    -------
    >>> class List(list, Composable):
    ...     def then(self, other):
    ...         return self + other
    >>> assert List([1, 2]) >> List([3]) == List([1, 2, 3])
    >>> assert List([3]) << List([1, 2]) == List([1, 2, 3])
    """
    factory: Type[Composable]
    dom: T
    cod: T

    @abstractmethod
    def then(self, other: Optional[Composable[T]], *others: Composable[T]
             ) -> Composable[T]:
        """
        Sequential composition, to be instantiated.

        Parameters:
            other : The other composable object to compose sequentially.
        """

    def is_composable(self, other: Composable) -> bool:
        """
        Whether two objects are composable, i.e. the codomain of the first is
        the domain of the second.

        Parameters:
            other : The other composable object.
        """
        return self.cod == other.dom

    def is_parallel(self, other: Composable) -> bool:
        """
        Whether two composable objects are parallel, i.e. they have the same
        domain and codomain.

        Parameters:
            other : The other composable object.
        """
        return (self.dom, self.cod) == (other.dom, other.cod)

    __rshift__ = __llshift__ = lambda self, other: self.then(other)
    __lshift__ = __lrshift__ = lambda self, other: other.then(self)


def factory(cls: Type[Composable]) -> Type[Composable]:
    """
    Allows the identity and composition of a :class:`Morphism` subclass to
    remain within the subclass.

    Parameters:
        cls : Some subclass of :class:`Morphism`.
    """
    cls.factory = cls
    return cls


class AxiomError(Exception):
    """ The gods of category theory are not happy. """


class LayoutError(ValueError):
    """ Malformed grouping input to the layout engine. """


def assert_iscomposable(left: Composable, right: Composable):
    """
    Raise :class:`AxiomError` if two objects are not composable,
    i.e. the domain of ``right`` is not the codomain of ``left``.

    Parameters:
        left : A composable object.
        right : Another composable object.
    """
    if not left.is_composable(right):
        raise AxiomError(messages.NOT_COMPOSABLE.format(
            left, right, left.cod, right.dom))
