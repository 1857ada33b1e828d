# -*- coding: utf-8 -*-

"""
The graphs underlying a diagram, shared by the layout and commutativity
engines.

Summary
-------

.. autosummary::
    :template: class.rst
    :nosignatures:
    :toctree:

    Group

.. admonition:: Functions

    .. autosummary::
        :template: function.rst
        :nosignatures:
        :toctree:

        label
        simplify
        units
        skeleton
        arrows
        hom_index
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Union
from warnings import warn

from networkx import Graph, DiGraph

from diagrammar import messages
from diagrammar.cat import Ob, Morphism, Diagram, Tags
from diagrammar.utils import LayoutError, assert_isinstance, factory_name


class Group(frozenset):
    """
    A group is a non-empty set of objects placed as a single unit.

    Example
    -------
    >>> A, C = Ob('A'), Ob('C')
    >>> group = Group([C, A])
    >>> print(group)
    {A, C}
    >>> group
    graph.Group({cat.Ob('A'), cat.Ob('C')})
    """
    def __repr__(self):
        inside = ", ".join(map(repr, sorted(self)))
        return f"{factory_name(type(self))}({{{inside}}})"

    def __str__(self):
        return "{" + ", ".join(map(str, sorted(self))) + "}"

    @property
    def name(self) -> str:
        """ The name of a group, i.e. the names of its members. """
        return str(self)


Unit = Union[Ob, Group]
""" A unit of placement is either an object or a group of objects. """


def label(unit: Unit) -> str:
    """ The deterministic sort key of a unit. """
    return unit.name


def simplify(morphisms: Mapping[Morphism, Tags]) -> dict[Morphism, Tags]:
    """
    Drop the identities, and the composites without tags whose components
    are all present: they are implied and never drawn.

    Parameters:
        morphisms : The mapping from morphisms to tags.

    Example
    -------
    >>> from diagrammar.cat import NamedMorphism
    >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'B', 'C')
    >>> assert simplify(Diagram([f, g]).morphisms) == {f: set(), g: set()}
    >>> assert f >> g in simplify(Diagram({f: "iso", g: "iso"}).morphisms)
    """
    return {
        morphism: tags for morphism, tags in morphisms.items()
        if not morphism.is_identity and not (
            morphism.is_composite and not tags
            and all(box in morphisms for box in morphism.inside))}


def units(diagram: Diagram, groups: Iterable[Iterable[Ob]] = None
          ) -> dict[Ob, Unit]:
    """
    Map every object of a diagram to its unit of placement, i.e. the object
    itself or the group it belongs to.

    Parameters:
        diagram : The diagram to lay out.
        groups : Disjoint non-empty sets of objects.

    Raises:
        LayoutError : If some group is empty or two groups overlap.

    Note
    ----
    Objects not in the diagram are ignored with a warning, and a group with
    a single object is placed as that object.

    Example
    -------
    >>> from diagrammar.cat import NamedMorphism
    >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'B', 'C')
    >>> A, B, C = map(Ob, "ABC")
    >>> result = units(Diagram([f, g]), [{A, C}])
    >>> assert result[A] == result[C] == Group({A, C}) and result[B] == B
    """
    objects = set(diagram.objects)
    result: dict[Ob, Unit] = {x: x for x in objects}
    owner: dict[Ob, Group] = {}
    for group in groups or ():
        assert_isinstance(group, Iterable)
        members = Group(group)
        if not members:
            raise LayoutError(messages.EMPTY_GROUP)
        for obj in sorted(members):
            assert_isinstance(obj, Ob)
            if obj in owner:
                raise LayoutError(messages.OVERLAPPING_GROUPS.format(
                    obj, owner[obj], members))
            owner[obj] = members
        if not members <= objects:
            missing = Group(members - objects)
            warn(messages.NOT_IN_DIAGRAM.format(missing, members))
            members = Group(members & objects)
        if not members:
            continue
        unit = members if len(members) > 1 else next(iter(members))
        for obj in members:
            result[obj] = unit
    return result


def _add_weighted_edge(graph, source, target):
    if graph.has_edge(source, target):
        graph.edges[source, target]['weight'] += 1
    else:
        graph.add_edge(source, target, weight=1)


def skeleton(diagram: Diagram, units: Mapping[Ob, Unit]) -> Graph:
    """
    The undirected graph between units, weighted by the number of drawn
    morphisms joining them. Morphisms inside a unit are left out.

    Parameters:
        diagram : The diagram to lay out.
        units : The mapping from objects to units, see :func:`units`.
    """
    graph = Graph()
    graph.add_nodes_from(sorted(set(units.values()), key=label))
    for morphism in sorted(simplify(diagram.morphisms)):
        source, target = units[morphism.dom], units[morphism.cod]
        if source != target:
            _add_weighted_edge(graph, source, target)
    return graph


def arrows(diagram: Diagram, units: Mapping[Ob, Unit]) -> DiGraph:
    """
    The directed graph between units, weighted by the number of drawn
    morphisms from one to the other. Morphisms inside a unit are left out.

    Parameters:
        diagram : The diagram to lay out.
        units : The mapping from objects to units, see :func:`units`.
    """
    graph = DiGraph()
    graph.add_nodes_from(sorted(set(units.values()), key=label))
    for morphism in sorted(simplify(diagram.morphisms)):
        source, target = units[morphism.dom], units[morphism.cod]
        if source != target:
            _add_weighted_edge(graph, source, target)
    return graph


def hom_index(diagram: Diagram) -> dict[tuple[Ob, Ob], tuple[Morphism, ...]]:
    """
    Index the non-identity morphisms of a diagram by domain and codomain.

    Parameters:
        diagram : The indexed diagram.
    """
    result: dict[tuple[Ob, Ob], list[Morphism]] = {}
    for morphism in sorted(diagram.morphisms):
        if not morphism.is_identity:
            result.setdefault((morphism.dom, morphism.cod), []).append(
                morphism)
    return {key: tuple(value) for key, value in result.items()}
