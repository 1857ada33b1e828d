# -*- coding: utf-8 -*-

from pytest import raises
from diagrammar.cat import Ob, NamedMorphism, Diagram, Id
from diagrammar.graph import Group
from diagrammar.utils import LayoutError
from diagrammar.layout import *


A, B, C, D, E = map(Ob, "ABCDE")
f, g, h = NamedMorphism('f', A, B), NamedMorphism('g', B, C),\
    NamedMorphism('h', A, C)


def test_layout_chain():
    grid = layout(Diagram([f, g]))
    assert grid == Grid({(0, 0): A, (1, 0): B, (1, 1): C}, 2, 2)
    assert str(grid) == "A\nB C"
    assert grid.cost(Diagram([f, g])) == 2


def test_layout_triangle():
    grid = layout(Diagram([f, g, h]))
    assert grid.cells == {(0, 0): A, (0, 1): B, (1, 1): C}
    assert str(grid) == "A B\n  C"
    assert grid.cost(Diagram([f, g, h])) == 4


def test_layout_deterministic():
    assert layout(Diagram([h, g, f])) == layout(Diagram([f, g, h]))
    assert str(layout(Diagram([f, g, h]))) == str(layout(Diagram([f, g, h])))


def test_layout_groups():
    grid = layout(Diagram([f, g]), groups=[{A, C}])
    assert str(grid) == "B {A, C}"
    assert grid.position(A) == grid.position(C)\
        == grid.position(Group({A, C})) == (0, 1)
    assert grid.units == (B, Group({A, C}))


def test_layout_singleton_group():
    assert layout(Diagram([f, g]), groups=[{B}]) == layout(Diagram([f, g]))


def test_layout_errors():
    diagram = Diagram([f, g])
    with raises(LayoutError):
        layout(diagram, groups=[{A, B}, {B, C}])
    with raises(LayoutError):
        layout(diagram, groups=[set()])
    with raises(ValueError):
        layout(diagram, mode="circle")


def test_layout_completeness():
    a, b = NamedMorphism('a', A, B), NamedMorphism('b', B, D)
    c, d = NamedMorphism('c', A, C), NamedMorphism('d', C, D)
    diagram = Diagram([a, b, c, d, Id(E)])
    grid = layout(diagram)
    assert sorted(grid.units) == [A, B, C, D, E]
    assert len(set(grid.cells)) == 5
    assert grid.position(E) == (0, grid.width - 1)
    assert all(0 <= i < grid.height and 0 <= j < grid.width
               for i, j in grid.cells)


def test_linear_layout():
    k, x = NamedMorphism('k', C, D), NamedMorphism('x', E, D)
    assert str(layout(Diagram([f, g, k]), mode="linear")) == "A B C D"
    assert str(layout(Diagram([k, x]), mode="linear")) == "C E D"


def test_linear_layout_cycle():
    k = NamedMorphism('k', B, A)
    grid = layout(Diagram([f, k, g]), mode="linear")
    assert grid == Grid({(0, 0): A, (0, 1): B, (0, 2): C}, 3, 1)


def test_layout_transpose():
    diagram = Diagram([f, g])
    assert str(layout(diagram, mode="linear", transpose=True)) == "A\nB\nC"
    assert layout(diagram, transpose=True) == layout(diagram).transpose()
    assert layout(diagram).transpose().transpose() == layout(diagram)


def test_layout_empty():
    assert layout(Diagram()) == Grid()
    assert str(Grid()) == "" and Grid().cost(Diagram()) == 0


def test_Grid():
    grid = layout(Diagram([f, g]))
    assert grid[0, 0] == A and grid[0, 1] is None
    assert grid.positions == {A: (0, 0), B: (1, 0), C: (1, 1)}
    with raises(KeyError):
        grid.position(D)
    array = grid.to_array()
    assert array.shape == (2, 2) and array[1, 1] == C and array[0, 1] is None


def test_Grid_flatten():
    diagram = Diagram([f, g])
    grid = layout(diagram, groups=[{A, C}]).flatten(diagram)
    assert grid == Grid({(0, 0): B, (0, 1): A, (0, 2): C}, 3, 1)
    whole = layout(diagram, groups=[{A, B, C}])
    assert str(whole) == "{A, B, C}"
    assert whole.flatten(diagram) == layout(diagram)
    assert layout(diagram).flatten(diagram) == layout(diagram)


def test_layout_star():
    leaves = [Ob(f'L{i}') for i in range(6)]
    diagram = Diagram([NamedMorphism(f'f{i}', A, leaf)
                       for i, leaf in enumerate(leaves)])
    grid = layout(diagram)
    assert sorted(grid.units) == sorted([A] + leaves)
    assert len(grid.cells) == 7
    corners = [grid.position(leaf) for leaf in leaves[4:]]
    i, j = grid.position(A)
    assert all(max(abs(x - i), abs(y - j)) == 1 for x, y in corners)


def test_layout_surrounded_hubs():
    left = [Ob(f'L{i}') for i in range(5)]
    right = [Ob(f'R{i}') for i in range(5)]
    diagram = Diagram(
        [NamedMorphism('k', A, B)]
        + [NamedMorphism(f'l{i}', A, x) for i, x in enumerate(left)]
        + [NamedMorphism(f'r{i}', B, x) for i, x in enumerate(right)])
    grid = layout(diagram)
    assert sorted(grid.units) == sorted([A, B] + left + right)
    assert len(grid.cells) == 12
    assert grid == layout(diagram)
