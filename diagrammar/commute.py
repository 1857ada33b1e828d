# -*- coding: utf-8 -*-

"""
The commutativity engine tries to certify that a diagram commutes by covering
its morphisms with embeddings of diagrams known to commute.

The search is sound but not complete: a :class:`Cover` is always a valid
certificate, while :class:`Undetermined` is not a proof of anything.

Summary
-------

.. autosummary::
    :template: class.rst
    :nosignatures:
    :toctree:

    Budget
    Embedding
    Cover
    Undetermined

.. admonition:: Functions

    .. autosummary::
        :template: function.rst
        :nosignatures:
        :toctree:

        embeddings
        check

Example
-------
>>> from diagrammar.cat import Ob, NamedMorphism, Diagram
>>> def triangle(f, g, h, x, y, z):
...     x, y, z = map(Ob, (x, y, z))
...     return Diagram([NamedMorphism(f, x, y), NamedMorphism(g, y, z),
...                     NamedMorphism(h, x, z)])
>>> axiom = triangle('f', 'g', 'h', 'A', 'B', 'C')
>>> target = triangle('p', 'q', 'r', 'X', 'Y', 'Z')
>>> cover = check(target, {axiom})
>>> assert cover and len(cover) == 1
>>> cover[0].ob
{cat.Ob('A'): cat.Ob('X'), cat.Ob('B'): cat.Ob('Y'), cat.Ob('C'): cat.Ob('Z')}
>>> cover.verify()
>>> k = NamedMorphism('k', 'X', 'Y')
>>> result = check(Diagram([k]), {axiom})
>>> assert not result and result.uncovered == {k}
>>> result.reason
'uncoverable'
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from time import monotonic
from typing import Optional

from diagrammar import messages
from diagrammar.cat import Ob, Morphism, Diagram, Id
from diagrammar.config import DEFAULT_BUDGET
from diagrammar.graph import hom_index
from diagrammar.utils import (
    AxiomError,
    Composable,
    assert_isinstance,
    dumps,
    factory_name,
)


class BudgetExceeded(Exception):
    """ The search ran out of budget, always caught by :func:`check`. """


class Budget:
    """
    A budget bounds the search by a number of node expansions, a wall-clock
    timeout and a number of candidates per axiom morphism.

    Parameters:
        max_steps : The maximum number of expansions, or ``None``.
        timeout : The maximum number of seconds, or ``None``.
        max_candidates : The number of target morphisms tried for each
            axiom morphism, or ``None``.

    Example
    -------
    >>> budget = Budget(max_steps=1)
    >>> budget.tick()
    >>> budget.tick()
    Traceback (most recent call last):
    ...
    diagrammar.commute.BudgetExceeded: Search budget exceeded after 1 steps.
    """
    def __init__(self, max_steps: Optional[int] = DEFAULT_BUDGET['max_steps'],
                 timeout: Optional[float] = DEFAULT_BUDGET['timeout'],
                 max_candidates: Optional[int] = DEFAULT_BUDGET[
                     'max_candidates']):
        self.max_steps, self.timeout = max_steps, timeout
        self.max_candidates = max_candidates
        self.steps = 0
        self.deadline = None if timeout is None else monotonic() + timeout

    def tick(self):
        """ Count one expansion, raise :class:`BudgetExceeded` if over. """
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps\
                or self.deadline is not None and monotonic() > self.deadline:
            raise BudgetExceeded(
                messages.BUDGET_EXCEEDED.format(self.steps - 1))

    def truncate(self, candidates: list) -> list:
        """ Keep at most :code:`max_candidates` candidates. """
        return candidates if self.max_candidates is None\
            else candidates[:self.max_candidates]

    def __repr__(self):
        return f"{factory_name(type(self))}(max_steps={self.max_steps}, "\
               f"timeout={self.timeout}, "\
               f"max_candidates={self.max_candidates})"


class Embedding(Composable[Diagram]):
    """
    An embedding is a pair of injective maps :code:`ob` and :code:`ar` from
    the objects and non-identity morphisms of a diagram :code:`dom` to those
    of a diagram :code:`cod`, preserving domains, codomains and composites.

    Parameters:
        ob : Mapping from the objects of :code:`dom` to those of :code:`cod`.
        ar : Mapping from the non-identity morphisms of :code:`dom` to those
            of :code:`cod`.
        dom : The embedded diagram, i.e. an axiom.
        cod : The target diagram.

    Example
    -------
    >>> from diagrammar.cat import NamedMorphism
    >>> f, g = NamedMorphism('f', 'A', 'B'), NamedMorphism('g', 'X', 'Y')
    >>> F = Embedding({Ob('A'): Ob('X'), Ob('B'): Ob('Y')}, {f: g},
    ...               Diagram([f]), Diagram([g]))
    >>> assert F(f) == g and F(Id('A')) == Id('X') and F.is_valid()
    """
    def __init__(self, ob: Mapping[Ob, Ob], ar: Mapping[Morphism, Morphism],
                 dom: Diagram, cod: Diagram):
        self.ob, self.ar = dict(ob), dict(ar)
        self.dom, self.cod = dom, cod

    def __call__(self, other: Ob | Morphism) -> Ob | Morphism:
        if isinstance(other, Ob):
            return self.ob[other]
        assert_isinstance(other, Morphism)
        if other.is_identity:
            return Id(self.ob[other.dom])
        return self.ar[other]

    @property
    def image(self) -> frozenset[Morphism]:
        """ The non-identity morphisms of :code:`cod` hit by the embedding. """
        return frozenset(self.ar.values())

    def then(self, other: Embedding) -> Embedding:
        """
        The composition of an embedding with another.

        Parameters:
            other : An embedding of :code:`self.cod` into another diagram.
        """
        assert_isinstance(other, Embedding)
        ob = {x: other.ob[y] for x, y in self.ob.items()}
        ar = {f: other.ar[g] for f, g in self.ar.items()}
        return type(self)(ob, ar, self.dom, other.cod)

    def is_composable(self, other: Embedding) -> bool:
        return self.cod == other.dom

    def verify(self):
        """
        Check that the embedding is total, injective and structure-preserving.

        Raises:
            AxiomError : Otherwise.
        """
        def fail(reason):
            raise AxiomError(messages.NOT_AN_EMBEDDING.format(self, reason))
        morphisms = {m for m in self.dom.morphisms if not m.is_identity}
        targets = self.cod.morphisms
        if set(self.ob) != set(self.dom.objects):
            fail("not total on objects.")
        if not set(self.ob.values()) <= set(self.cod.objects):
            fail("some object is not in the target.")
        if len(set(self.ob.values())) != len(self.ob):
            fail("not injective on objects.")
        if set(self.ar) != morphisms:
            fail("not total on morphisms.")
        if len(self.image) != len(self.ar):
            fail("not injective on morphisms.")
        for f, g in self.ar.items():
            if g.is_identity or g not in targets:
                fail(f"{g} is not a morphism of the target.")
            if (g.dom, g.cod) != (self.ob[f.dom], self.ob[f.cod]):
                fail(f"{f} and {g} are not parallel.")
            if f.is_composite and all(box in morphisms for box in f.inside)\
                    and g != Id(g.dom).then(*map(self, f.inside)):
                fail(f"{g} is not the composite of the images of {f}.")

    def is_valid(self) -> bool:
        """ Whether :meth:`verify` succeeds. """
        try:
            self.verify()
        except AxiomError:
            return False
        return True

    def __eq__(self, other):
        return isinstance(other, Embedding) and (
            self.ob, self.ar, self.dom, self.cod) == (
            other.ob, other.ar, other.dom, other.cod)

    def __hash__(self):
        return hash((frozenset(self.ob.items()), frozenset(self.ar.items())))

    def __repr__(self):
        ar = "{" + ", ".join(
            f"{f}: {self.ar[f]}" for f in sorted(self.ar)) + "}"
        return f"{factory_name(type(self))}(ob={self.ob}, ar={ar})"


def _degrees(morphisms: Iterable[Morphism]) -> dict[Ob, tuple[int, int]]:
    result: dict[Ob, tuple[int, int]] = {}
    for morphism in morphisms:
        out, in_ = result.get(morphism.dom, (0, 0))
        result[morphism.dom] = (out + 1, in_)
        out, in_ = result.get(morphism.cod, (0, 0))
        result[morphism.cod] = (out, in_ + 1)
    return result


def embeddings(axiom: Diagram, target: Diagram,
               budget: Budget = None) -> Iterator[Embedding]:
    """
    Enumerate the embeddings of an axiom into a target diagram, by
    backtracking over the non-identity morphisms of the axiom.

    The next axiom morphism is the one with the most endpoints already
    mapped. Its candidates are the unused target morphisms between the images
    of its endpoints, or from and to unused objects with enough incoming and
    outgoing morphisms, at most :code:`budget.max_candidates` of them.
    Composites of axiom morphisms are not searched: their image is the
    composite of the images of their components.

    Parameters:
        axiom : The embedded diagram.
        target : The target diagram.
        budget : The search budget, shared across calls.

    Raises:
        BudgetExceeded : When the budget runs out.

    Note
    ----
    Objects of the axiom without any non-identity morphism are sent to the
    first unused objects of the target, so that embeddings with the same
    morphism map are only enumerated once.
    """
    budget = Budget() if budget is None else budget
    morphisms = [m for m in sorted(axiom.morphisms) if not m.is_identity]
    present = set(morphisms)
    forced = [m for m in morphisms if m.is_composite
              and all(box in present for box in m.inside)]
    free = [m for m in morphisms if m not in set(forced)]
    dependents = {f: [c for c in forced if f in c.inside] for f in free}
    index = hom_index(target)
    targets = [m for key in sorted(index) for m in index[key]]
    all_targets = set(targets)
    axiom_degrees, target_degrees = _degrees(morphisms), _degrees(targets)
    ob: dict[Ob, Ob] = {}
    ar: dict[Morphism, Morphism] = {}
    used_ob: set[Ob] = set()
    used_ar: set[Morphism] = set()

    def fits(x, y):
        return y not in used_ob and all(
            a <= b for a, b in zip(
                axiom_degrees[x], target_degrees.get(y, (0, 0))))

    def candidates(f):
        dom, cod = ob.get(f.dom), ob.get(f.cod)
        if dom is not None and cod is not None:
            pool = index.get((dom, cod), ())
        else:
            pool = [m for m in targets
                    if (dom is None or m.dom == dom)
                    and (cod is None or m.cod == cod)]
        return budget.truncate([
            m for m in pool if m not in used_ar
            and (f.dom == f.cod) == (m.dom == m.cod)
            and (dom is not None or fits(f.dom, m.dom))
            and (cod is not None or f.cod == f.dom or fits(f.cod, m.cod))])

    def assign(f, m):
        new = {x: y for x, y in [(f.dom, m.dom), (f.cod, m.cod)]
               if x not in ob}
        ob.update(new)
        used_ob.update(new.values())
        ar[f] = m
        used_ar.add(m)
        return new

    def unassign(f, new):
        used_ar.discard(ar.pop(f))
        for x in new:
            used_ob.discard(ob.pop(x))

    def close(f):
        """ Map the composites which are now determined, or fail. """
        closed = []
        for composite in dependents[f]:
            if not all(box in ar for box in composite.inside):
                continue
            image = Id(ob[composite.dom]).then(
                *(ar[box] for box in composite.inside))
            if image not in all_targets or image in used_ar:
                for done in closed:
                    used_ar.discard(ar.pop(done))
                return None
            ar[composite] = image
            used_ar.add(image)
            closed.append(composite)
        return closed

    def isolated():
        missing = [x for x in axiom.objects if x not in ob]
        unused = [y for y in target.objects if y not in used_ob]
        if len(unused) < len(missing):
            return None
        return dict(zip(missing, unused))

    def search():
        remaining = [f for f in free if f not in ar]
        if not remaining:
            extra = isolated()
            if extra is not None:
                yield Embedding({**ob, **extra}, ar, axiom, target)
            return
        f = max(remaining, key=lambda f: (f.dom in ob) + (f.cod in ob))
        for m in candidates(f):
            budget.tick()
            new = assign(f, m)
            closed = close(f)
            if closed is not None:
                yield from search()
                for composite in closed:
                    used_ar.discard(ar.pop(composite))
            unassign(f, new)

    yield from search()


@dataclass(frozen=True)
class Undetermined:
    """
    The outcome of a search which found no cover. This is not a proof that
    the diagram does not commute.

    Parameters:
        reason : Either ``"uncoverable"`` when no embedding covers the
            :code:`uncovered` morphisms, or ``"budget"`` when the search ran
            out of budget.
        uncovered : The target morphisms left uncovered.
    """
    reason: str
    uncovered: frozenset[Morphism] = field(default_factory=frozenset)

    def __bool__(self):
        return False


class Cover:
    """
    A cover is a tuple of embeddings into a :code:`target` diagram whose
    images contain all its non-identity morphisms, i.e. a certificate that
    the target commutes.

    Parameters:
        embeddings : The embeddings of axioms into the target.
        target : The covered diagram.

    Note
    ----
    A cover is always truthy, even the empty cover of a diagram with only
    identities.
    """
    def __init__(self, embeddings: Iterable[Embedding], target: Diagram):
        self.embeddings, self.target = tuple(embeddings), target

    def __iter__(self):
        for embedding in self.embeddings:
            yield embedding

    def __len__(self):
        return len(self.embeddings)

    def __getitem__(self, key):
        return self.embeddings[key]

    def __bool__(self):
        return True

    def __eq__(self, other):
        return isinstance(other, Cover) and (
            self.embeddings, self.target) == (other.embeddings, other.target)

    def __hash__(self):
        return hash(self.embeddings)

    def __repr__(self):
        return f"{factory_name(type(self))}({list(self.embeddings)})"

    @property
    def image(self) -> frozenset[Morphism]:
        """ The morphisms of the target hit by some embedding. """
        return frozenset().union(*(e.image for e in self.embeddings))

    def verify(self):
        """
        Re-check every embedding and that they cover the target.

        Raises:
            AxiomError : If the certificate is not valid.
        """
        for embedding in self.embeddings:
            if embedding.cod != self.target:
                raise AxiomError(messages.NOT_AN_EMBEDDING.format(
                    embedding, "wrong target."))
            embedding.verify()
        missing = {m for m in self.target.morphisms
                   if not m.is_identity} - self.image
        if missing:
            raise AxiomError(messages.NOT_AN_EMBEDDING.format(
                self, f"{sorted(missing)} are not covered."))

    def is_valid(self) -> bool:
        """ Whether :meth:`verify` succeeds. """
        try:
            self.verify()
        except AxiomError:
            return False
        return True


def check(target: Diagram, axioms: Iterable[Diagram],
          max_steps: Optional[int] = DEFAULT_BUDGET['max_steps'],
          timeout: Optional[float] = DEFAULT_BUDGET['timeout'],
          max_candidates: Optional[int] = DEFAULT_BUDGET['max_candidates']
          ) -> Cover | Undetermined:
    """
    Try to cover the non-identity morphisms of a target diagram with
    embeddings of axioms, i.e. diagrams assumed to commute.

    All the embeddings are enumerated, then picked greedily: each step takes
    the first embedding covering the most morphisms not covered yet.

    Parameters:
        target : The diagram to certify.
        axioms : The diagrams assumed to commute.
        max_steps : The maximum number of expansions, or ``None``.
        timeout : The maximum number of seconds, or ``None``.
        max_candidates : The number of target morphisms tried for each axiom
            morphism, or ``None``.

    Returns:
        A :class:`Cover` if one was found, :class:`Undetermined` otherwise.
    """
    assert_isinstance(target, Diagram)
    axioms = set(axioms)
    for axiom in axioms:
        assert_isinstance(axiom, Diagram)
    goal = {m for m in target.morphisms if not m.is_identity}
    if not goal:
        return Cover((), target)
    budget = Budget(max_steps, timeout, max_candidates)
    found, images = [], set()
    try:
        for axiom in sorted(axioms, key=dumps):
            for embedding in embeddings(axiom, target, budget):
                if embedding.image not in images:
                    images.add(embedding.image)
                    found.append(embedding)
    except BudgetExceeded:
        return Undetermined(
            "budget", frozenset(goal - frozenset().union(*images)))
    uncovered, chosen = set(goal), []
    while uncovered:
        best = max(found, key=lambda e: len(e.image & uncovered), default=None)
        if best is None or not best.image & uncovered:
            return Undetermined("uncoverable", frozenset(uncovered))
        chosen.append(best)
        uncovered -= best.image
    return Cover(chosen, target)
