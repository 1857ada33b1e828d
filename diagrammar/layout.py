# -*- coding: utf-8 -*-

"""
The layout engine places the objects of a diagram on a grid, trying to keep
arrows short.

Summary
-------

.. autosummary::
    :template: class.rst
    :nosignatures:
    :toctree:

    Grid

.. admonition:: Functions

    .. autosummary::
        :template: function.rst
        :nosignatures:
        :toctree:

        layout
        triangle_layout
        linear_layout

Example
-------
>>> from diagrammar.cat import Ob, NamedMorphism, Diagram
>>> A, B, C = map(Ob, "ABC")
>>> f, g, h = [NamedMorphism(n, x, y) for n, x, y in [
...     ('f', A, B), ('g', B, C), ('h', A, C)]]
>>> print(layout(Diagram([f, g, h])))
A B
  C
>>> print(layout(Diagram([f, g]), mode="linear"))
A B C

Note
----
The arrow length is the Manhattan distance between cells, and the layout
minimises their sum greedily: it is a heuristic, not an exact optimiser.
The sum is over the arrows which are drawn, see :func:`graph.simplify`:
identities and composites without tags whose components are in the diagram
are left out, and so are the arrows inside a group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np
from networkx import (
    Graph,
    DiGraph,
    condensation,
    connected_components,
    lexicographical_topological_sort,
)

from diagrammar import messages
from diagrammar.cat import Ob, Diagram
from diagrammar.config import DEFAULT_LAYOUT, LAYOUTS
from diagrammar.graph import (
    Group, Unit, label, simplify, units, skeleton, arrows)

Cell = tuple[int, int]
""" A cell is a pair of integers ``(row, col)``. """

STEPS = ((-1, 0), (0, -1), (0, 1), (1, 0))


@dataclass
class Grid:
    """
    A grid is a partial mapping from cells to units, with a width and height.

    Parameters:
        cells : The mapping from ``(row, col)`` to objects or groups.
        width : The number of columns.
        height : The number of rows.

    Example
    -------
    >>> A, B = Ob('A'), Ob('B')
    >>> grid = Grid({(0, 0): A, (1, 1): B}, 2, 2)
    >>> assert grid[0, 0] == A and grid[0, 1] is None
    >>> assert grid.position(B) == (1, 1)
    >>> print(grid.transpose())
    A
      B
    """
    cells: dict[Cell, Unit] = field(default_factory=dict)
    width: int = 0
    height: int = 0

    def __getitem__(self, key: Cell) -> Unit | None:
        return self.cells.get(tuple(key))

    @property
    def units(self) -> tuple[Unit, ...]:
        """ The units of the grid, in row-major order. """
        return tuple(self.cells[cell] for cell in sorted(self.cells))

    @property
    def positions(self) -> dict[Unit, Cell]:
        """
        The cell of every unit, and of every object inside a group.
        """
        result = {}
        for cell, unit in self.cells.items():
            result[unit] = cell
            if isinstance(unit, Group):
                result.update({obj: cell for obj in unit})
        return result

    def position(self, obj: Unit) -> Cell:
        """
        The cell of an object or group.

        Parameters:
            obj : The object or group.

        Raises:
            KeyError : If the object is not on the grid.
        """
        return self.positions[obj]

    def cost(self, diagram: Diagram) -> int:
        """
        The sum of the Manhattan lengths of the drawn arrows of a diagram,
        ignoring the arrows inside a cell.

        Parameters:
            diagram : The diagram laid out on the grid.
        """
        positions = self.positions
        pairs = [(positions[m.dom], positions[m.cod])
                 for m in simplify(diagram.morphisms)]
        pairs = [(source, target) for source, target in pairs
                 if source != target]
        if not pairs:
            return 0
        sources, targets = np.array(pairs).transpose(1, 0, 2)
        return int(np.abs(sources - targets).sum())

    def transpose(self) -> Grid:
        """ Swap rows and columns. """
        return Grid({(j, i): unit for (i, j), unit in self.cells.items()},
                    self.height, self.width)

    def to_array(self) -> np.ndarray:
        """
        The grid as a dense array of objects, with ``None`` for empty cells.

        Example
        -------
        >>> Grid({(0, 1): Ob('A')}, 2, 1).to_array()
        array([[None, cat.Ob('A')]], dtype=object)
        """
        array = np.full((self.height, self.width), None, dtype=object)
        for (i, j), unit in self.cells.items():
            array[i, j] = unit
        return array

    def flatten(self, diagram: Diagram, mode: str = DEFAULT_LAYOUT) -> Grid:
        """
        Replace every group by a sub-grid of its members laid out on their
        own, stretching rows and columns to fit.

        Parameters:
            diagram : The diagram laid out on the grid.
            mode : The layout of the groups.

        Example
        -------
        >>> from diagrammar.cat import NamedMorphism
        >>> A, B, C = map(Ob, "ABC")
        >>> f, g = NamedMorphism('f', A, B), NamedMorphism('g', B, C)
        >>> grid = Grid({(0, 0): Group({A, B}), (1, 0): C}, 1, 2)
        >>> print(grid.flatten(Diagram([f, g]), mode="linear"))
        A B
        C
        """
        if not self.cells:
            return Grid()
        subgrids = {
            cell: layout(diagram.subdiagram_from_objects(unit), mode=mode)
            for cell, unit in self.cells.items() if isinstance(unit, Group)}
        heights, widths = [1] * self.height, [1] * self.width
        for (i, j), subgrid in subgrids.items():
            heights[i] = max(heights[i], subgrid.height)
            widths[j] = max(widths[j], subgrid.width)
        rows = np.concatenate([[0], np.cumsum(heights)]).tolist()
        cols = np.concatenate([[0], np.cumsum(widths)]).tolist()
        cells = {}
        for (i, j), unit in self.cells.items():
            if (i, j) in subgrids:
                cells.update({
                    (rows[i] + k, cols[j] + l): obj
                    for (k, l), obj in subgrids[i, j].cells.items()})
            else:
                cells[rows[i], cols[j]] = unit
        return Grid(cells, cols[-1], rows[-1])

    def __str__(self):
        widths = [max([len(label(unit)) for (_, j), unit in self.cells.items()
                       if j == col] or [0]) for col in range(self.width)]
        return "\n".join(
            " ".join(
                label(self[i, j]).ljust(widths[j]) if self[i, j] is not None
                else " " * widths[j] for j in range(self.width)).rstrip()
            for i in range(self.height))


def _normalise(cells: dict[Cell, Unit]) -> Grid:
    if not cells:
        return Grid()
    top = min(i for i, _ in cells)
    left = min(j for _, j in cells)
    cells = {(i - top, j - left): unit for (i, j), unit in cells.items()}
    return Grid(cells, max(j for _, j in cells) + 1,
                max(i for i, _ in cells) + 1)


def _free_cells(around: list[Cell], occupied: set[Cell]) -> list[Cell]:
    """
    The empty cells next to the given cells or, when they are all taken, the
    empty cells of the smallest square ring around them with one.
    """
    cells = {(i + di, j + dj) for i, j in around for di, dj in STEPS}
    radius = 1
    while not cells - occupied:
        cells = {(i + di, j + dj) for i, j in around
                 for di in range(-radius, radius + 1)
                 for dj in range(-radius, radius + 1)
                 if max(abs(di), abs(dj)) == radius}
        radius += 1
    return sorted(cells - occupied)


def _forward(source: Cell, target: Cell) -> bool:
    return source[0] <= target[0] and source[1] <= target[1]


def _best_cell(unit: Unit, graph: Graph, directed: DiGraph,
               positions: dict[Unit, Cell]) -> Cell:
    """
    The empty cell near a placed neighbour of :code:`unit`, see
    :func:`_free_cells`, which minimises in order: the incremental arrow
    length, how far the bounding box is from a square, the number of arrows
    not pointing right or down, the number of extensions of the bounding box
    up or left, and ``(row, col)``.
    """
    neighbours = [v for v in sorted(graph[unit], key=label) if v in positions]
    occupied = set(positions.values())
    candidates = _free_cells([positions[v] for v in neighbours], occupied)
    placed = np.array([positions[v] for v in neighbours])
    weights = np.array([graph[unit][v]['weight'] for v in neighbours])
    distances = np.abs(
        np.array(candidates)[:, None, :] - placed[None, :, :]).sum(axis=2)
    costs = (distances * weights).sum(axis=1).tolist()
    top, left = (min(x[k] for x in occupied) for k in (0, 1))
    bottom, right = (max(x[k] for x in occupied) for k in (0, 1))

    def key(index):
        i, j = candidates[index]
        height = max(bottom, i) - min(top, i) + 1
        width = max(right, j) - min(left, j) + 1
        backward = sum(
            not _forward((i, j), positions[v]) for v in neighbours
            if directed.has_edge(unit, v)) + sum(
            not _forward(positions[v], (i, j)) for v in neighbours
            if directed.has_edge(v, unit))
        extensions = int(i < top) + int(j < left)
        return costs[index], abs(height - width), backward, extensions, (i, j)
    return candidates[min(range(len(candidates)), key=key)]


def _place_component(graph: Graph, directed: DiGraph) -> Grid:
    nodes = sorted(graph.nodes, key=label)
    first = min(nodes, key=lambda u: (
        -graph.degree(u), -graph.degree(u, weight='weight'), label(u)))
    positions = {first: (0, 0)}
    while len(positions) < len(nodes):
        def priority(u):
            placed = [v for v in graph[u] if v in positions]
            return (-len(placed),
                    -sum(graph[u][v]['weight'] for v in placed), label(u))
        unit = min((u for u in nodes if u not in positions), key=priority)
        positions[unit] = _best_cell(unit, graph, directed, positions)
    return _normalise({cell: unit for unit, cell in positions.items()})


def triangle_layout(diagram: Diagram, units: dict[Ob, Unit]) -> Grid:
    """
    Grow each connected component greedily around its best connected unit,
    then concatenate the components from left to right.

    At each step, the next unit is the one with the most placed neighbours,
    then the heaviest arrows to placed units, then the smallest label. It is
    placed next to one of its placed neighbours, see :func:`_best_cell`.

    Parameters:
        diagram : The diagram to lay out.
        units : The mapping from objects to units, see :func:`graph.units`.
    """
    graph, directed = skeleton(diagram, units), arrows(diagram, units)
    components = sorted(
        (sorted(component, key=label)
         for component in connected_components(graph)),
        key=lambda component: label(component[0]))
    cells, width, height = {}, 0, 0
    for component in components:
        block = _place_component(graph.subgraph(component), directed)
        cells.update({
            (i, j + width): unit for (i, j), unit in block.cells.items()})
        width, height = width + block.width, max(height, block.height)
    return Grid(cells, width, height)


def linear_layout(diagram: Diagram, units: dict[Ob, Unit]) -> Grid:
    """
    Put all the units in one row, sources first, breaking ties by label.

    Cycles are collapsed into a single step of the traversal, their members
    being sorted by label.

    Parameters:
        diagram : The diagram to lay out.
        units : The mapping from objects to units, see :func:`graph.units`.
    """
    dag = condensation(arrows(diagram, units))

    def members(node):
        return sorted(dag.nodes[node]['members'], key=label)
    order = [
        unit for node in lexicographical_topological_sort(
            dag, key=lambda node: label(members(node)[0]))
        for unit in members(node)]
    return Grid({(0, j): unit for j, unit in enumerate(order)},
                len(order), int(bool(order)))


def layout(diagram: Diagram, groups: Iterable[Iterable[Ob]] = None,
           mode: str = DEFAULT_LAYOUT, transpose: bool = False) -> Grid:
    """
    Place the objects of a diagram on a grid, each group of objects in a
    single cell.

    Parameters:
        diagram : The diagram to lay out.
        groups : Disjoint non-empty sets of objects.
        mode : Either ``"triangle"`` or ``"linear"``.
        transpose : Whether to swap rows and columns.

    Raises:
        LayoutError : If some group is empty or two groups overlap.
        ValueError : If the mode is unknown.

    Example
    -------
    >>> from diagrammar.cat import NamedMorphism
    >>> A, B, C = map(Ob, "ABC")
    >>> f, g = NamedMorphism('f', A, B), NamedMorphism('g', B, C)
    >>> print(layout(Diagram([f, g]), groups=[{A, C}]))
    B {A, C}
    >>> print(layout(Diagram([f, g]), mode="linear", transpose=True))
    A
    B
    C
    """
    if mode not in LAYOUTS:
        raise ValueError(messages.UNKNOWN_LAYOUT.format(LAYOUTS, mode))
    mapping = units(diagram, groups)
    grid = linear_layout(diagram, mapping) if mode == "linear"\
        else triangle_layout(diagram, mapping)
    return grid.transpose() if transpose else grid
