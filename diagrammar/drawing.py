# -*- coding: utf-8 -*-
"""
Drawing diagrams laid out on a grid: xypic markup and matplotlib.

Summary
-------

.. autosummary::
    :template: class.rst
    :nosignatures:
    :toctree:

    Arrow
    Backend
    XyPic
    Matplotlib

.. admonition:: Functions

    .. autosummary::
        :template: function.rst
        :nosignatures:
        :toctree:

        draw
        xypic_draw_diagram

Example
-------
>>> from diagrammar.cat import Ob, NamedMorphism, Diagram
>>> A, B, C = map(Ob, "ABC")
>>> f, g = NamedMorphism('f', A, B), NamedMorphism('g', B, C)
>>> print(xypic_draw_diagram(Diagram([f, g], {f >> g: "unique"})))
\\xymatrix{
A \\ar[r]^{f} \\ar@{-->}[dr]^{g \\circ f} & B \\ar[d]^{g} \\\\
 & C
}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional

import matplotlib.pyplot as plt
from matplotlib.patches import FancyArrowPatch
from sympy import Symbol, latex

from diagrammar.cat import Ob, Morphism, Diagram, Tags
from diagrammar.config import DEFAULT_LAYOUT, XYPIC_DEFAULT, DRAWING_DEFAULT
from diagrammar.graph import simplify
from diagrammar.layout import Cell, Grid, layout


def typeset(other: Ob | Morphism) -> str:
    """
    The LaTeX label of an object or a non-identity morphism.

    Example
    -------
    >>> from diagrammar.cat import NamedMorphism
    >>> typeset(Ob('alpha_1'))
    '\\\\alpha_{1}'
    >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'B', 'C')
    >>> typeset(f >> g)
    'g \\\\circ f'
    """
    if isinstance(other, Ob):
        return latex(Symbol(other.name))
    return r" \circ ".join(
        latex(Symbol(box.name)) for box in reversed(other.inside))


@dataclass
class Arrow:
    """
    An arrow to draw, from the cell of the domain of a morphism to that of its
    codomain.

    Parameters:
        morphism : The morphism to draw.
        source : The cell of the domain.
        target : The cell of the codomain.
        tags : The tags of the morphism.
        is_conclusion : Whether the morphism is a conclusion.
        curving : Signed offset from the straight line, in arrow widths.
        loop : Index of the loop around its cell, ``None`` if not a loop.
    """
    morphism: Morphism
    source: Cell
    target: Cell
    tags: Tags = Tags()
    is_conclusion: bool = False
    curving: float = 0
    loop: Optional[int] = None

    @property
    def label(self) -> str:
        """ The LaTeX label of the arrow. """
        return typeset(self.morphism)


def arrange(diagram: Diagram, grid: Grid) -> list[Arrow]:
    """
    The arrows to draw for a diagram on a grid of objects: the premises
    without identities and implied composites, and all the conclusions.

    Parallel arrows between the same two cells get distinct curvings, loops
    around the same cell get distinct indices.

    Parameters:
        diagram : The diagram to draw.
        grid : A grid of objects, i.e. without groups.
    """
    positions = grid.positions
    morphisms = dict(simplify(diagram.premises))
    conclusions = {m for m in diagram.conclusions if not m.is_identity}
    for morphism in conclusions:
        morphisms[morphism] = morphisms.get(morphism, Tags())\
            | diagram.conclusions[morphism]
    bundles: dict[tuple[Cell, Cell], list[Arrow]] = {}
    for morphism in sorted(morphisms):
        source, target = positions[morphism.dom], positions[morphism.cod]
        arrow = Arrow(morphism, source, target, morphisms[morphism],
                      morphism in conclusions)
        bundles.setdefault(tuple(sorted([source, target])), []).append(arrow)
    result = []
    for (first, _), bundle in sorted(bundles.items()):
        for k, arrow in enumerate(bundle):
            if arrow.source == arrow.target:
                arrow.loop = k
            elif len(bundle) > 1:
                offset = k - (len(bundle) - 1) / 2
                arrow.curving = offset if arrow.source == first else -offset
            result.append(arrow)
    return result


class Backend(ABC):
    """ Abstract drawing backend. """
    def __init__(self, width: int, height: int):
        self.width, self.height = width, height

    @abstractmethod
    def draw_object(self, text: str, i: int, j: int):
        """ Draws the label of an object in a given cell. """

    @abstractmethod
    def draw_arrow(self, arrow: Arrow):
        """ Draws an arrow between two cells, possibly curved or a loop. """

    @abstractmethod
    def output(self, path: str = None, show: bool = True, **params):
        """ Output the drawing. """


class XyPic(Backend):
    """
    XyPic drawing backend, each arrow is written in the cell of its source.

    Parameters:
        width : The number of columns.
        height : The number of rows.
        diagram_format : Options of the ``\\xymatrix`` command.
        formats : Mapping from tags to arrow styles, e.g. ``"{ >->}"``.
    """
    def __init__(self, width, height, diagram_format: str = None,
                 formats: Mapping[str, str] = None):
        super().__init__(width, height)
        self.diagram_format = XYPIC_DEFAULT['diagram_format']\
            if diagram_format is None else diagram_format
        self.formats = formats or {}
        self.cells = [[[] for _ in range(width)] for _ in range(height)]

    def draw_object(self, text, i, j):
        self.cells[i][j].insert(0, text)

    @staticmethod
    def direction(source: Cell, target: Cell) -> str:
        """
        The xypic direction from a cell to another.

        Example
        -------
        >>> XyPic.direction((0, 0), (2, -1))
        'ddl'
        """
        rows, cols = target[0] - source[0], target[1] - source[1]
        return ('d' if rows > 0 else 'u') * abs(rows)\
            + ('r' if cols > 0 else 'l') * abs(cols)

    def style(self, arrow: Arrow) -> str:
        """ The arrow style from its tags, dashed for conclusions. """
        if arrow.is_conclusion:
            return XYPIC_DEFAULT['conclusion_style']
        for tag in sorted(arrow.tags):
            if tag in self.formats:
                return self.formats[tag]
        return ""

    def draw_arrow(self, arrow):
        style, curving, position = self.style(arrow), "", "^"
        if arrow.loop is not None:
            loops = XYPIC_DEFAULT['loops']
            out, in_ = loops[arrow.loop % len(loops)]
            curving, direction = f"@({out},{in_})", ""
        else:
            direction = self.direction(arrow.source, arrow.target)
            if arrow.curving:
                position = "^" if arrow.curving > 0 else "_"
                size = abs(arrow.curving) * XYPIC_DEFAULT['curving']
                curving = f"@/{position}{size:g}mm/"
        self.cells[arrow.source[0]][arrow.source[1]].append(
            f"\\ar{'@' + style if style else ''}{curving}[{direction}]"
            f"{position}{{{arrow.label}}}")

    def output(self, path=None, show=False, **params):
        rows = [" & ".join(" ".join(cell) for cell in row).rstrip()
                for row in self.cells]
        markup = f"\\xymatrix{self.diagram_format}{{\n"\
                 + " \\\\\n".join(rows) + "\n}"
        if path is not None:
            with open(path, 'w+') as file:
                file.write(markup + "\n")
        if show:
            print(markup)
        return markup


class Matplotlib(Backend):
    """
    Matplotlib drawing backend, rows go down and columns go right.

    Parameters:
        width : The number of columns.
        height : The number of rows.
        figsize : The size of the figure, by default proportional to the
            grid.
        axis : An existing matplotlib axis to draw on.
    """
    def __init__(self, width, height, figsize=None, axis=None):
        super().__init__(width, height)
        self.cellsize = DRAWING_DEFAULT['cellsize']
        figsize = figsize or (
            max(width, 1) * self.cellsize, max(height, 1) * self.cellsize)
        self.axis = axis or plt.subplots(
            figsize=figsize, facecolor='white')[1]

    def point(self, i, j):
        """ The coordinates of the centre of a cell. """
        return j * self.cellsize, -i * self.cellsize

    def draw_object(self, text, i, j, **params):
        self.axis.text(
            *self.point(i, j), f"${text}$",
            horizontalalignment='center', verticalalignment='center',
            fontsize=params.get('fontsize', DRAWING_DEFAULT['fontsize']))

    def draw_arrow(self, arrow):
        (x0, y0), (x1, y1) = map(lambda c: self.point(*c),
                                 (arrow.source, arrow.target))
        if arrow.loop is not None:
            size = DRAWING_DEFAULT['loopsize'] * (1 + arrow.loop)
            start, end = (x0 - size / 2, y0 + size / 2), (x0 + size / 2,
                                                          y0 + size / 2)
            rad, shrink = -2, 0
        else:
            start, end = (x0, y0), (x1, y1)
            rad, shrink = -arrow.curving * DRAWING_DEFAULT['curving'], 15
        self.axis.add_patch(FancyArrowPatch(
            start, end, arrowstyle='-|>', mutation_scale=12,
            connectionstyle=f"arc3,rad={rad}", shrinkA=shrink, shrinkB=shrink,
            linestyle='--' if arrow.is_conclusion else '-', color='black'))
        mid_x, mid_y = (start[0] + end[0]) / 2, (start[1] + end[1]) / 2
        if arrow.loop is not None:
            mid_y += size
        else:
            mid_x -= rad * (end[1] - start[1]) / 2
            mid_y += rad * (end[0] - start[0]) / 2
        self.axis.text(
            mid_x, mid_y, f"${arrow.label}$",
            horizontalalignment='center', verticalalignment='bottom',
            fontsize=DRAWING_DEFAULT['fontsize'] * .8)

    def output(self, path=None, show=True, **params):
        margin_x, margin_y = params.get('margins', DRAWING_DEFAULT['margins'])
        half = self.cellsize / 2
        self.axis.set_xlim(
            -half - margin_x, (self.width - 1) * self.cellsize + half
            + margin_x)
        self.axis.set_ylim(
            -(self.height - 1) * self.cellsize - half - margin_y,
            half + margin_y)
        self.axis.set_aspect('equal')
        self.axis.axis('off')
        if path is not None:
            plt.savefig(path)
            plt.close()
        if show:
            plt.show()


def draw(diagram: Diagram, grid: Grid = None, groups=None,
         mode: str = DEFAULT_LAYOUT, **params):
    """
    Draw a diagram on a grid, laying it out first if no grid is given.

    Parameters
    ----------
    diagram : Diagram
        The diagram to draw.
    grid : Grid, optional
        A layout of the diagram, possibly with groups.
    groups : list of sets of objects, optional
        Passed to :func:`layout` when no grid is given.
    mode : str, optional
        The layout of the diagram and of its groups.
    to_xypic : bool, optional
        Whether to output xypic markup instead of matplotlib.
    diagram_format : str, optional
        Options of the ``\\xymatrix`` command, e.g. ``"@+1cm"``.
    formats : dict, optional
        Mapping from tags to xypic arrow styles.
    figsize : tuple, optional
        Figure size.
    path : str, optional
        Where to save the drawing.
    show : bool, optional
        Whether to show the drawing, default is :code:`True`.

    Returns
    -------
    The xypic markup when :code:`to_xypic`, else :code:`None`.
    """
    grid = layout(diagram, groups, mode) if grid is None else grid
    grid = grid.flatten(diagram, mode)
    backend = XyPic(
        grid.width, grid.height,
        diagram_format=params.get('diagram_format', None),
        formats=params.get('formats', None))\
        if params.get('to_xypic', False) else Matplotlib(
            grid.width, grid.height, figsize=params.get('figsize', None))
    for (i, j), obj in sorted(grid.cells.items()):
        backend.draw_object(typeset(obj), i, j)
    for arrow in arrange(diagram, grid):
        backend.draw_arrow(arrow)
    return backend.output(
        path=params.get('path', None), show=params.get('show', True),
        margins=params.get('margins', DRAWING_DEFAULT['margins']))


def xypic_draw_diagram(diagram: Diagram, **params) -> str:
    """
    The xypic markup of a diagram, see :func:`draw` for the parameters.
    """
    return draw(diagram, **dict(params, to_xypic=True, show=False))
