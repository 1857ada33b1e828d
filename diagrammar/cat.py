# -*- coding: utf-8 -*-

"""
Objects, morphisms and diagrams of a category, and categories given by a pool
of diagrams asserted to commute.

Summary
-------

.. autosummary::
    :template: class.rst
    :nosignatures:
    :toctree:

    Ob
    Morphism
    NamedMorphism
    Diagram
    Category

Axioms
------

We can create named morphisms with objects as domain and codomain:

>>> A, B, C = Ob('A'), Ob('B'), Ob('C')
>>> f, g = NamedMorphism('f', A, B), NamedMorphism('g', B, C)

Composition is associative and unital:

>>> assert Id(A) >> f == f == f >> Id(B)
>>> assert (f >> g).components == (f, g) and (f >> g).dom == A

Diagrams are closed under composition and identities:

>>> d = Diagram([f, g])
>>> assert f >> g in d.premises and Id(B) in d.premises
>>> d.objects
(cat.Ob('A'), cat.Ob('B'), cat.Ob('C'))
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import total_ordering
from typing import Optional, Type
from warnings import warn

from diagrammar import messages, utils
from diagrammar.utils import (
    factory,
    factory_name,
    from_tree,
    Composable,
    AxiomError,
    assert_isinstance,
    assert_iscomposable,
)

dumps, loads = utils.dumps, utils.loads

Tags = frozenset
""" Property tags are opaque strings, never interpreted by the engines. """


@total_ordering
class Ob:
    """
    An object with a string as :code:`name`.

    Parameters:
        name : The name of the object.

    Example
    -------
    >>> x, x_, y = Ob('A'), Ob('A'), Ob('B')
    >>> assert x == x_ and x != y and x < y
    """
    def __init__(self, name: str):
        assert_isinstance(name, str)
        self.name = name

    def __repr__(self):
        return f"{factory_name(type(self))}({repr(self.name)})"

    def __str__(self):
        return str(self.name)

    def __eq__(self, other):
        return isinstance(other, type(self)) and self.name == other.name

    def __hash__(self):
        return hash(repr(self))

    def __lt__(self, other):
        return self.name < other.name

    def to_tree(self) -> dict:
        """
        Serialise an object, see :func:`dumps`.

        Example
        -------
        >>> Ob('A').to_tree()
        {'factory': 'cat.Ob', 'name': 'A'}
        """
        return {'factory': factory_name(type(self)), 'name': self.name}

    @classmethod
    def from_tree(cls, tree: dict) -> Ob:
        """
        Decode a serialised object, see :func:`loads`.

        Parameters:
            tree : The serialisation.
        """
        return cls(tree['name'])


@factory
@total_ordering
class Morphism(Composable[Ob]):
    """
    A morphism is a tuple of composable named morphisms :code:`inside` with a
    pair of objects :code:`dom` and :code:`cod` as domain and codomain.

    An empty tuple is an identity, a tuple of length one is atomic and a
    longer tuple is a composite, applying its components from first to last.

    Parameters:
        inside : The components of the morphism, in composition order.
        dom : The domain of the morphism, i.e. its source.
        cod : The codomain of the morphism, i.e. its target.
        _scan : Whether to check composition.

    Raises:
        AxiomError : Whenever the components do not chain.

    Tip
    ---
    Use :meth:`Morphism.id` and :meth:`Morphism.then` rather than
    initialising composites directly.

    >>> A, B, C = map(Ob, "ABC")
    >>> f, g = NamedMorphism('f', A, B), NamedMorphism('g', B, C)
    >>> assert f >> g == Morphism((f, g), A, C)
    >>> assert (f >> g).is_composite and not f.is_composite
    """
    ty_factory = Ob

    def __init__(self, inside: tuple[NamedMorphism, ...], dom: Ob | str,
                 cod: Ob | str, _scan: bool = True) -> None:
        ty_factory = type(self).ty_factory
        dom = dom if isinstance(dom, ty_factory) else ty_factory(dom)
        cod = cod if isinstance(cod, ty_factory) else ty_factory(cod)
        self.dom, self.cod, self.inside = dom, cod, tuple(inside)
        if _scan:
            for box in self.inside:
                assert_isinstance(box, NamedMorphism)
            for f, g in zip((self.id(dom), ) + self.inside,
                            self.inside + (self.id(cod), )):
                assert_iscomposable(f, g)

    @property
    def components(self) -> tuple[NamedMorphism, ...]:
        """ The named morphisms of a morphism, in composition order. """
        return self.inside

    @property
    def is_identity(self) -> bool:
        """ Whether the morphism is an identity. """
        return not self.inside

    @property
    def is_composite(self) -> bool:
        """ Whether the morphism has more than one component. """
        return len(self.inside) > 1

    @property
    def name(self) -> str:
        """
        The name of a morphism, in the usual order of composition.

        Example
        -------
        >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'B', 'C')
        >>> assert (f >> g).name == "g∘f" and Id('A').name == "id_A"
        """
        if self.is_identity:
            return f"id_{self.dom}"
        return "∘".join(box.name for box in reversed(self.inside))

    def __iter__(self):
        for box in self.inside:
            yield box

    def __len__(self):
        return len(self.inside)

    def __repr__(self):
        if not self.inside:  # i.e. self is identity.
            return f"{factory_name(self.factory)}.id({repr(self.dom)})"
        return f"{factory_name(self.factory)}(inside={repr(self.inside)}, " \
               f"dom={repr(self.dom)}, cod={repr(self.cod)})"

    def __str__(self):
        return ' >> '.join(map(str, self.inside)) or f"Id({self.dom})"

    def __eq__(self, other):
        return isinstance(other, Morphism)\
            and self.is_parallel(other) and self.inside == other.inside

    def __hash__(self):
        return hash(repr(self))

    def __lt__(self, other):
        return self.sort_key < other.sort_key

    @property
    def sort_key(self) -> tuple:
        """ Deterministic sort key: length, names, domain, codomain. """
        return (len(self), tuple(box.name for box in self.inside),
                self.dom.name, self.cod.name)

    @classmethod
    def id(cls: Type[Morphism], dom: Optional[Ob] = None) -> Morphism:
        """
        The identity morphism with the empty tuple inside, called with ``Id``.

        Parameters:
            dom : The domain (and codomain) of the identity.

        Example
        -------
        >>> assert Morphism.id('A') == Id('A') == Id(Ob('A'))
        >>> assert Id('A').is_identity
        """
        return cls.factory((), dom, dom, _scan=False)

    def then(self, *others: Morphism) -> Morphism:
        """
        Sequential composition, called with :code:`>>` and :code:`<<`.

        Parameters:
            others : The other morphisms to compose.

        Raises:
            AxiomError : Whenever `self` and `others` do not compose.
        """
        inside, dom, cod = self.inside, self.dom, self.cod
        for other in others:
            assert_isinstance(other, Morphism)
            assert_iscomposable(self.factory(inside, dom, cod, _scan=False),
                                other)
            inside, cod = inside + other.inside, other.cod
        return self.factory(inside, dom, cod, _scan=False)

    def to_tree(self) -> dict:
        """
        Serialise a morphism, see :func:`diagrammar.utils.dumps`.

        Example
        -------
        >>> Id('A').to_tree()  # doctest: +NORMALIZE_WHITESPACE
        {'factory': 'cat.Morphism', 'inside': [],
         'dom': {'factory': 'cat.Ob', 'name': 'A'},
         'cod': {'factory': 'cat.Ob', 'name': 'A'}}
        """
        return {
            'factory': factory_name(self.factory),
            'inside': [box.to_tree() for box in self.inside],
            'dom': self.dom.to_tree(), 'cod': self.cod.to_tree()}

    @classmethod
    def from_tree(cls, tree: dict) -> Morphism:
        """
        Decode a serialised morphism, see :func:`diagrammar.utils.loads`.

        Parameters:
            tree : The serialisation.
        """
        dom, cod = map(from_tree, (tree['dom'], tree['cod']))
        inside = tuple(map(from_tree, tree['inside']))
        return cls(inside, dom, cod)


class NamedMorphism(Morphism):
    """
    A named morphism is an atomic morphism, with the tuple of just itself
    inside.

    Parameters:
        name : The name of the morphism.
        dom : The domain of the morphism.
        cod : The codomain of the morphism.

    Example
    -------
    >>> f = NamedMorphism('f', 'A', 'B')
    >>> assert f.inside == (f, ) and f.dom == Ob('A')
    """
    def __init__(self, name: str, dom: Ob | str, cod: Ob | str):
        assert_isinstance(name, str)
        self._name = name
        Morphism.__init__(self, (self, ), dom, cod, _scan=False)

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self):
        return factory_name(type(self))\
            + f"({repr(self.name)}, {repr(self.dom)}, {repr(self.cod)})"

    def __str__(self):
        return str(self.name)

    def __hash__(self):
        return hash(Morphism.__repr__(self))

    def __eq__(self, other):
        if isinstance(other, NamedMorphism):
            return type(self) is type(other)\
                and self.name == other.name and self.is_parallel(other)
        return isinstance(other, Morphism)\
            and self.is_parallel(other) and other.inside == (self, )

    def to_tree(self) -> dict:
        return {
            'factory': factory_name(type(self)),
            'name': self.name,
            'dom': self.dom.to_tree(),
            'cod': self.cod.to_tree()}

    @classmethod
    def from_tree(cls, tree: dict) -> NamedMorphism:
        dom, cod = map(from_tree, (tree['dom'], tree['cod']))
        return cls(tree['name'], dom, cod)


Id = Morphism.id


def tagged(morphisms) -> dict[Morphism, Tags]:
    """
    Turn an iterable of morphisms, or a mapping from morphisms to iterables of
    tags, into a mapping from morphisms to frozensets of tags.

    Example
    -------
    >>> f = NamedMorphism('f', 'A', 'B')
    >>> assert tagged([f]) == {f: frozenset()}
    >>> assert tagged({f: "mono"}) == {f: frozenset({"mono"})}
    """
    if not isinstance(morphisms, Mapping):
        morphisms = {morphism: () for morphism in morphisms}
    result = {}
    for morphism, tags in morphisms.items():
        assert_isinstance(morphism, Morphism)
        tags = (tags, ) if isinstance(tags, str) else tuple(tags)
        for tag in tags:
            assert_isinstance(tag, str)
        result[morphism] = result.get(morphism, Tags()) | Tags(tags)
    return result


class Diagram:
    """
    A diagram is a mapping from morphisms to property tags, partitioned into
    :code:`premises` and :code:`conclusions`.

    The premises are closed: the components of composite premises are added,
    then the identity of every object and every composite of a chain of
    pairwise distinct atomic premises, tagged with the tags all its
    components share.

    Parameters:
        premises : Morphisms, or mapping from morphisms to tags.
        conclusions : Morphisms, or mapping from morphisms to tags.
        identities : Whether to add identities to the premises.
        composites : Whether to add composites to the premises.

    Raises:
        AxiomError : If an identity is given some tags.

    Note
    ----
    Conclusions are not closed, and the conclusions whose endpoints are not
    objects of the premises are dropped.

    Example
    -------
    >>> A, B, C = map(Ob, "ABC")
    >>> f, g = NamedMorphism('f', A, B), NamedMorphism('g', B, C)
    >>> d = Diagram({f: "mono", g: ["mono", "epi"]})
    >>> assert d.premises[f >> g] == {"mono"}
    >>> assert d.hom(A, C) == ({f >> g}, set())
    >>> assert len(Diagram([f, g], identities=False, composites=False)
    ...     .premises) == 2
    """
    def __init__(self, premises=(), conclusions=(),
                 identities: bool = True, composites: bool = True):
        self.premises: dict[Morphism, Tags] = {}
        self.conclusions: dict[Morphism, Tags] = {}
        for morphism, tags in tagged(premises).items():
            if morphism.is_composite:
                for box in morphism.inside:
                    self._add(self.premises, box, Tags())
            self._add(self.premises, morphism, tags)
        objects = self.objects
        if identities:
            for obj in objects:
                self._add(self.premises, Id(obj), Tags())
        if composites:
            self._add_composites()
        for morphism, tags in tagged(conclusions).items():
            missing = [x for x in (morphism.dom, morphism.cod)
                       if x not in objects]
            if missing:
                warn(messages.CONCLUSION_OUT_OF_PREMISES.format(
                    morphism, missing[0]))
                continue
            self._add(self.conclusions, morphism, tags)

    @staticmethod
    def _add(mapping: dict, morphism: Morphism, tags: Tags):
        if morphism.is_identity and tags:
            raise AxiomError(messages.IDENTITY_WITH_PROPERTIES.format(
                morphism, set(tags)))
        mapping[morphism] = mapping.get(morphism, Tags()) | tags

    def _add_composites(self):
        atoms = sorted(m for m in self.premises if len(m) == 1)
        outgoing = {}
        for atom in atoms:
            outgoing.setdefault(atom.dom, []).append(atom)

        def extend(chain, tags):
            for atom in outgoing.get(chain[-1].cod, []):
                if atom in chain:
                    continue
                new_chain = chain + (atom, )
                new_tags = tags & self.premises[atom]
                composite = Morphism(
                    tuple(box for m in new_chain for box in m.inside),
                    new_chain[0].dom, atom.cod, _scan=False)
                self._add(self.premises, composite, new_tags)
                extend(new_chain, new_tags)

        for atom in atoms:
            extend((atom, ), self.premises[atom])

    @property
    def objects(self) -> tuple[Ob, ...]:
        """ The objects of the diagram, i.e. the endpoints of its premises. """
        return tuple(sorted(
            {x for m in self.premises for x in (m.dom, m.cod)}))

    @property
    def morphisms(self) -> dict[Morphism, Tags]:
        """ The premises and conclusions, with the union of their tags. """
        result = dict(self.premises)
        for morphism, tags in self.conclusions.items():
            result[morphism] = result.get(morphism, Tags()) | tags
        return result

    def hom(self, dom: Ob, cod: Ob) -> tuple[set[Morphism], set[Morphism]]:
        """
        The premises and the conclusions from :code:`dom` to :code:`cod`.

        Parameters:
            dom : The domain of the morphisms.
            cod : The codomain of the morphisms.
        """
        return tuple(
            {m for m in mapping if (m.dom, m.cod) == (dom, cod)}
            for mapping in (self.premises, self.conclusions))

    def is_subdiagram(self, other: Diagram) -> bool:
        """
        Whether every premise and conclusion of :code:`self` is one of
        :code:`other`, with at least the same tags.

        Example
        -------
        >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'B', 'C')
        >>> assert Diagram([f]).is_subdiagram(Diagram([f, g]))
        >>> assert not Diagram({f: "mono"}).is_subdiagram(Diagram([f, g]))
        """
        return all(
            morphism in theirs and tags <= theirs[morphism]
            for ours, theirs in [(self.premises, other.premises),
                                 (self.conclusions, other.conclusions)]
            for morphism, tags in ours.items())

    def subdiagram_from_objects(self, objects: Iterable[Ob]) -> Diagram:
        """
        The diagram of the premises and conclusions which only go through
        the given :code:`objects`.

        Parameters:
            objects : The objects to keep.

        Example
        -------
        >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'B', 'C')
        >>> sub = Diagram([f, g]).subdiagram_from_objects(map(Ob, "AB"))
        >>> assert sub == Diagram([f])
        """
        objects = set(objects)

        def inside(morphism):
            return {morphism.dom, morphism.cod} <= objects and all(
                {box.dom, box.cod} <= objects for box in morphism.inside)
        premises = {m: t for m, t in self.premises.items() if inside(m)}
        conclusions = {m: t for m, t in self.conclusions.items() if inside(m)}
        return type(self)(premises, conclusions)

    def __eq__(self, other):
        return isinstance(other, Diagram)\
            and (self.premises, self.conclusions)\
            == (other.premises, other.conclusions)

    def __hash__(self):
        return hash((frozenset(self.premises.items()),
                     frozenset(self.conclusions.items())))

    def __repr__(self):
        def tags_repr(mapping):
            return "{" + ", ".join(
                f"{repr(m)}: {repr(sorted(mapping[m]))}"
                for m in sorted(mapping)) + "}"
        return f"{factory_name(type(self))}("\
               f"premises={tags_repr(self.premises)}, "\
               f"conclusions={tags_repr(self.conclusions)})"

    def __str__(self):
        premises = ", ".join(map(str, sorted(
            m for m in self.premises if len(m) == 1)))
        conclusions = ", ".join(map(str, sorted(self.conclusions)))
        return f"Diagram([{premises}], [{conclusions}])"

    def to_tree(self) -> dict:
        """
        Serialise a diagram, see :func:`diagrammar.utils.dumps`.

        Example
        -------
        >>> f = NamedMorphism('f', 'A', 'B')
        >>> assert Diagram.from_tree(Diagram([f]).to_tree()) == Diagram([f])
        """
        def encode(mapping):
            return [[m.to_tree(), sorted(mapping[m])] for m in sorted(mapping)]
        return {
            'factory': factory_name(type(self)),
            'premises': encode(self.premises),
            'conclusions': encode(self.conclusions)}

    @classmethod
    def from_tree(cls, tree: dict) -> Diagram:
        """
        Decode a serialised diagram, see :func:`diagrammar.utils.loads`.

        Parameters:
            tree : The serialisation.
        """
        def decode(pairs):
            return {from_tree(m): tags for m, tags in pairs}
        return cls(decode(tree['premises']), decode(tree['conclusions']),
                   identities=False, composites=False)

    def draw(self, **params):
        """ Draw a diagram, see :func:`diagrammar.drawing.draw`. """
        from diagrammar.drawing import draw
        return draw(self, **params)


class Category:
    """
    A category given by a :code:`name` and a pool of diagrams asserted to be
    commutative, i.e. the axioms of the commutativity engine.

    Parameters:
        name : The name of the category.
        commutative_diagrams : The diagrams asserted to commute.

    Example
    -------
    >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'B', 'C')
    >>> K = Category('K', [Diagram([f, g])])
    >>> K.objects
    (cat.Ob('A'), cat.Ob('B'), cat.Ob('C'))
    """
    def __init__(self, name: str,
                 commutative_diagrams: Iterable[Diagram] = ()):
        assert_isinstance(name, str)
        self.name = name
        self.commutative_diagrams = frozenset(commutative_diagrams)
        for diagram in self.commutative_diagrams:
            assert_isinstance(diagram, Diagram)

    @property
    def objects(self) -> tuple[Ob, ...]:
        """ The objects of the commutative diagrams. """
        return tuple(sorted({
            x for d in self.commutative_diagrams for x in d.objects}))

    def check(self, diagram: Diagram, **params):
        """
        Try to certify that a diagram commutes in the category,
        see :func:`diagrammar.commute.check`.

        Parameters:
            diagram : The target diagram.
            params : The search budget.
        """
        from diagrammar.commute import check
        return check(diagram, self.commutative_diagrams, **params)

    def __eq__(self, other):
        return isinstance(other, Category) and (
            self.name, self.commutative_diagrams) == (
            other.name, other.commutative_diagrams)

    def __hash__(self):
        return hash((self.name, self.commutative_diagrams))

    def __repr__(self):
        return f"{factory_name(type(self))}({repr(self.name)}, "\
               f"n_diagrams={len(self.commutative_diagrams)})"
