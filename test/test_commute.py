# -*- coding: utf-8 -*-

from pytest import raises
from diagrammar.cat import Ob, NamedMorphism, Diagram, Category, Id
from diagrammar.utils import AxiomError
from diagrammar.commute import *


A, B, C, D = map(Ob, "ABCD")
W, X, Y, Z = map(Ob, "WXYZ")
f, g, h = NamedMorphism('f', A, B), NamedMorphism('g', B, C),\
    NamedMorphism('h', A, C)
p, q, r = NamedMorphism('p', X, Y), NamedMorphism('q', Y, Z),\
    NamedMorphism('r', X, Z)
axiom, target = Diagram([f, g, h]), Diagram([p, q, r])


def test_embeddings():
    result = list(embeddings(axiom, target))
    assert len(result) == 1
    F, = result
    assert F.ob == {A: X, B: Y, C: Z}
    assert F(f) == p and F(g) == q and F(h) == r and F(f >> g) == p >> q
    assert F(Id(B)) == Id(Y) and F(A) == X
    assert F.image == {p, q, r, p >> q}
    assert F.is_valid()


def test_embeddings_isolated():
    F, = embeddings(Diagram([f, Id(D)]), Diagram([p, Id(W)]))
    assert F.ob == {A: X, B: Y, D: W} and F.ar == {f: p}


def test_embeddings_none():
    assert not list(embeddings(Diagram([f, g]), Diagram([p])))
    assert not list(embeddings(Diagram([f]), Diagram([Id(X)])))
    loop = NamedMorphism('e', A, A)
    assert not list(embeddings(Diagram([loop]), Diagram([p])))


def test_embeddings_budget():
    with raises(BudgetExceeded):
        list(embeddings(axiom, target, Budget(max_steps=1)))


def test_Budget():
    budget = Budget(max_steps=None, max_candidates=2)
    for _ in range(1000):
        budget.tick()
    assert budget.truncate([1, 2, 3]) == [1, 2]
    assert Budget(max_candidates=None).truncate([1, 2, 3]) == [1, 2, 3]
    assert repr(Budget()) == "commute.Budget(max_steps=100000, "\
        "timeout=None, max_candidates=64)"
    with raises(BudgetExceeded):
        Budget(timeout=-1).tick()


def test_check_triangle():
    cover = check(target, {axiom})
    assert isinstance(cover, Cover) and cover and len(cover) == 1
    assert cover[0].ob == {A: X, B: Y, C: Z}
    assert cover.image == {p, q, r, p >> q}
    cover.verify()


def test_check_uncoverable():
    k = NamedMorphism('k', X, Y)
    result = check(Diagram([k]), {axiom})
    assert isinstance(result, Undetermined) and not result
    assert result.reason == "uncoverable" and result.uncovered == {k}


def test_check_empty():
    cover = check(Diagram(), {axiom})
    assert cover and len(cover) == 0 and isinstance(cover, Cover)
    assert check(Diagram([Id(X)]), ()) == Cover((), Diagram([Id(X)]))


def test_check_square():
    a, b = NamedMorphism('a', W, X), NamedMorphism('b', X, Z)
    c, d = NamedMorphism('c', W, Y), NamedMorphism('d', Y, Z)
    e = NamedMorphism('e', W, Z)
    square = Diagram([a, b, c, d, e])
    cover = check(square, [axiom])
    assert cover and len(cover) == 2
    assert cover.image == {a, b, c, d, e, a >> b, c >> d}
    cover.verify()
    assert not check(square, [axiom], max_candidates=0)


def test_check_budget():
    result = check(target, [axiom], max_steps=1)
    assert not result and result.reason == "budget"
    assert result.uncovered == {p, q, r, p >> q}
    assert check(target, [axiom], max_steps=None)


def test_check_deterministic():
    square = Diagram([f, g, h, NamedMorphism('k', A, C)])
    assert check(square, [axiom]) == check(square, [axiom])
    assert check(target, [axiom, axiom]) == check(target, [axiom])


def test_check_monotone():
    other = Diagram([NamedMorphism('u', A, B)])
    assert check(target, [axiom, other])
    assert check(target, [other, axiom]).is_valid()


def test_check_ignores_tags():
    assert check(target, [Diagram({f: "mono", g: "epi", h: "iso"})])
    assert check(Diagram({p: "iso", q: "mono"}, {r: "unique"}), [axiom])


def test_check_type_error():
    with raises(TypeError):
        check(target, [f])
    with raises(TypeError):
        check(f, [axiom])


def test_Category_check():
    assert Category('K', [axiom]).check(target, max_steps=10)


def test_Embedding_verify():
    F = check(target, [axiom])[0]
    not_injective = Embedding(F.ob, {**F.ar, h: p}, F.dom, F.cod)
    with raises(AxiomError):
        not_injective.verify()
    not_total = Embedding(F.ob, {f: p}, F.dom, F.cod)
    assert not not_total.is_valid()
    wrong_composite = Embedding(F.ob, {**F.ar, f >> g: r, h: p >> q},
                                F.dom, F.cod)
    assert not wrong_composite.is_valid()
    swapped = Embedding({A: Y, B: X, C: Z}, F.ar, F.dom, F.cod)
    assert not swapped.is_valid()


def test_Embedding_then():
    F = check(target, [axiom])[0]
    G = check(axiom, [target])[0]
    assert (F >> G).ob == {A: A, B: B, C: C} and (F >> G).is_valid()
    assert (F >> G).ar == {m: m for m in F.ar}


def test_Cover_verify():
    cover = check(target, [axiom])
    with raises(AxiomError):
        Cover((), target).verify()
    tampered = Embedding(cover[0].ob, {**cover[0].ar, h: p},
                         cover[0].dom, cover[0].cod)
    assert not Cover([tampered], target).is_valid()
    assert not Cover(cover, Diagram([p, q, r, Id(W)])).is_valid()
    assert list(cover) == [cover[0]]
