# -*- coding: utf-8 -*-

from pytest import raises, warns
from diagrammar.cat import *


A, B, C = Ob('A'), Ob('B'), Ob('C')
f, g, h = NamedMorphism('f', A, B), NamedMorphism('g', B, C),\
    NamedMorphism('h', C, A)


def test_main():
    assert Id(A) >> f == f == f >> Id(B)
    assert (f >> g).dom == f.dom and (f >> g).cod == g.cod
    assert f >> g >> h == f >> (g >> h) == f.then(g, h)
    assert g << f == f >> g


def test_Ob_init():
    with raises(TypeError):
        Ob(42)


def test_Ob_repr():
    assert repr(Ob('x')) == "cat.Ob('x')"
    assert str(Ob('x')) == 'x'


def test_Ob_lt():
    assert sorted([C, A, B]) == [A, B, C]


def test_Morphism_init():
    assert Morphism((f, g), A, C) == f >> g
    assert Morphism((), 'A', 'A') == Id(A)
    with raises(AxiomError):
        Morphism((f, f), A, B)
    with raises(AxiomError):
        Morphism((f, ), A, C)
    with raises(TypeError):
        Morphism(('f', ), A, B)


def test_Morphism_then():
    with raises(AxiomError):
        f >> f
    with raises(TypeError):
        f >> 'g'
    assert (f >> g).components == (f, g)
    assert len(f >> g >> h) == 3 and list(f >> g) == [f, g]


def test_Morphism_is_identity():
    assert Id(A).is_identity and not Id(A).is_composite
    assert not f.is_identity and not f.is_composite
    assert (f >> g).is_composite


def test_Morphism_name():
    assert f.name == 'f' and (f >> g >> h).name == "h∘g∘f"
    assert Id(B).name == "id_B"


def test_Morphism_repr():
    assert repr(Id(A)) == "cat.Morphism.id(cat.Ob('A'))"
    assert repr(f) == "cat.NamedMorphism('f', cat.Ob('A'), cat.Ob('B'))"
    assert repr(f >> g) == "cat.Morphism(inside=("\
        "cat.NamedMorphism('f', cat.Ob('A'), cat.Ob('B')), "\
        "cat.NamedMorphism('g', cat.Ob('B'), cat.Ob('C'))), "\
        "dom=cat.Ob('A'), cod=cat.Ob('C'))"
    assert str(f >> g) == "f >> g" and str(Id(A)) == "Id(A)"


def test_NamedMorphism_eq():
    assert f == Morphism((f, ), A, B) and Morphism((f, ), A, B) == f
    assert hash(f) == hash(Morphism((f, ), A, B))
    assert f != NamedMorphism('f', A, C) and f != NamedMorphism('k', A, B)
    assert f != Id(A) and f != 'f'


def test_Morphism_lt():
    assert sorted([f >> g, g, Id(A), f]) == [Id(A), f, g, f >> g]


def test_Diagram_closure():
    diagram = Diagram([f, g])
    assert set(diagram.premises) == {f, g, f >> g, Id(A), Id(B), Id(C)}
    assert not diagram.conclusions
    assert set(Diagram([f >> g]).premises) == set(diagram.premises)


def test_Diagram_cycle():
    k = NamedMorphism('k', B, A)
    assert set(Diagram([f, k], identities=False).premises)\
        == {f, k, f >> k, k >> f}


def test_Diagram_closure_disabled():
    assert set(Diagram([f, g], identities=False, composites=False)
               .premises) == {f, g}
    assert set(Diagram([f, g], composites=False).premises)\
        == {f, g, Id(A), Id(B), Id(C)}


def test_Diagram_tags():
    diagram = Diagram({f: ["mono", "iso"], g: "iso"}, {f >> g: "unique"})
    assert diagram.premises[f] == {"mono", "iso"}
    assert diagram.premises[f >> g] == {"iso"}
    assert diagram.premises[Id(A)] == set()
    assert diagram.morphisms[f >> g] == {"iso", "unique"}
    assert Diagram({f: "a"}, {f: "b"}).morphisms[f] == {"a", "b"}


def test_Diagram_tags_type_error():
    with raises(TypeError):
        Diagram({f: [42]})
    with raises(TypeError):
        Diagram(['f'])


def test_Diagram_identity_with_tags():
    with raises(AxiomError):
        Diagram({Id(A): "mono"})
    with raises(AxiomError):
        Diagram([f], {Id(A): "unique"})


def test_Diagram_conclusion_out_of_premises():
    with warns(UserWarning):
        diagram = Diagram([f], [g])
    assert not diagram.conclusions
    assert Diagram([f, g], [f >> g]).conclusions == {f >> g: set()}


def test_Diagram_hom():
    diagram = Diagram([f, g], {f >> g: "unique"})
    assert diagram.hom(A, C) == ({f >> g}, {f >> g})
    assert diagram.hom(A, A) == ({Id(A)}, set())
    assert diagram.hom(C, A) == (set(), set())


def test_Diagram_objects():
    assert Diagram([g, f]).objects == (A, B, C)
    assert Diagram().objects == ()
    assert Diagram([Id(C)]).objects == (C, )


def test_Diagram_is_subdiagram():
    assert Diagram([f]).is_subdiagram(Diagram([f, g]))
    assert not Diagram([f, g]).is_subdiagram(Diagram([f]))
    assert not Diagram([f], [f]).is_subdiagram(Diagram([f]))


def test_Diagram_subdiagram_from_objects():
    diagram = Diagram({f: "mono", g: "mono"}, [f >> g])
    assert diagram.subdiagram_from_objects([A, B]) == Diagram({f: "mono"})
    sub = diagram.subdiagram_from_objects([A, C])
    assert set(sub.premises) == {Id(A), Id(C)} and not sub.conclusions


def test_Diagram_eq():
    assert Diagram([f, g]) == Diagram([g, f])
    assert hash(Diagram([f, g])) == hash(Diagram([g, f]))
    assert Diagram([f]) != Diagram({f: "mono"})
    assert Diagram([f]) != Diagram([f], [f])


def test_Diagram_repr():
    assert repr(Diagram([f], identities=False)) == "cat.Diagram(premises="\
        "{cat.NamedMorphism('f', cat.Ob('A'), cat.Ob('B')): []}, "\
        "conclusions={})"
    assert str(Diagram([f, g], [f >> g])) == "Diagram([f, g], [f >> g])"


def test_Diagram_to_tree():
    diagram = Diagram({f: "mono", g: ["epi", "mono"]}, [f >> g])
    assert Diagram.from_tree(diagram.to_tree()) == diagram
    assert loads(dumps(diagram)) == diagram


def test_Diagram_to_tree_without_closure():
    for diagram in [Diagram([f], identities=False),
                    Diagram([f, g], composites=False),
                    Diagram([f >> g], identities=False, composites=False)]:
        assert Diagram.from_tree(diagram.to_tree()) == diagram
        assert loads(dumps(diagram)) == diagram


def test_Category():
    X, Y, Z = map(Ob, "XYZ")
    p, q, r = NamedMorphism('p', X, Y), NamedMorphism('q', Y, Z),\
        NamedMorphism('r', X, Z)
    k = NamedMorphism('k', A, C)
    triangle = Diagram([f, g, k])
    K = Category('K', [triangle, Diagram([g, f, k])])
    assert len(K.commutative_diagrams) == 1
    assert K.objects == (A, B, C)
    assert K == Category('K', [triangle]) != Category('L', [triangle])
    assert repr(K) == "cat.Category('K', n_diagrams=1)"
    assert K.check(Diagram([p, q, r]))
    assert not Category('L').check(Diagram([p, q, r]))
    with raises(TypeError):
        Category('K', [f])


def test_Category_generator():
    triangle = Diagram([f, g, NamedMorphism('k', A, C)])
    K = Category('K', (diagram for diagram in [triangle]))
    assert K.commutative_diagrams == {triangle}
    assert K == Category('K', [triangle])
