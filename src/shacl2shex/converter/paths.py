"""Map SHACL property paths onto ShEx predicates.

ShEx triple constraints carry a single predicate, optionally inverted.
Anything richer is approximated by a representative predicate and the
original path is kept as a note for an annotation. Failures are returned
as :class:`UnsupportedConstruct` values rather than raised.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from rdflib import BNode, URIRef

from shacl2shex.errors import UnsupportedConstruct
from shacl2shex.graph import ShapesGraph
from shacl2shex.schema.shacl import SH, Term

_REPEAT_PATHS = (
    (SH.zeroOrMorePath, "*"),
    (SH.oneOrMorePath, "+"),
    (SH.zeroOrOnePath, "?"),
)


@dataclass
class PathTranslation:
    predicate: str
    inverse: bool = False
    one_or_more: bool = False
    notes: list[str] = field(default_factory=list)


PathResult = Union[PathTranslation, UnsupportedConstruct]


def describe_path(g: ShapesGraph, path: Term, _seen: frozenset = frozenset()) -> str:
    """SPARQL-style rendering of a SHACL path, for diagnostics."""
    if isinstance(path, URIRef):
        return f"<{path}>"
    if path in _seen or not isinstance(path, BNode):
        return "?"
    seen = _seen | {path}
    if g.is_list(path):
        return "(" + " / ".join(describe_path(g, p, seen) for p in _safe_items(g, path)) + ")"
    inverse = g.value(path, SH.inversePath)
    if inverse is not None:
        return "^" + describe_path(g, inverse, seen)
    alternatives = g.value(path, SH.alternativePath)
    if alternatives is not None:
        return "(" + " | ".join(describe_path(g, p, seen) for p in _safe_items(g, alternatives)) + ")"
    for predicate, suffix in _REPEAT_PATHS:
        inner = g.value(path, predicate)
        if inner is not None:
            return describe_path(g, inner, seen) + suffix
    return "?"


def _safe_items(g: ShapesGraph, head: Term) -> list[Term]:
    try:
        return g.items(head)
    except UnsupportedConstruct:
        return []


def translate_path(g: ShapesGraph, path: Term, _seen: frozenset = frozenset()) -> PathResult:
    """Translate ``path`` to a predicate (and direction) usable in ShEx."""
    if isinstance(path, URIRef):
        return PathTranslation(predicate=str(path))
    if not isinstance(path, BNode):
        return UnsupportedConstruct("property path", f"{path!r} is not a path", focus=str(path))
    if path in _seen:
        return UnsupportedConstruct("property path", "cyclic path definition", focus=str(path))
    seen = _seen | {path}

    if g.is_list(path):
        try:
            steps = g.items(path)
        except UnsupportedConstruct as e:
            return e
        if not steps:
            return UnsupportedConstruct("sequence path", "empty sequence", focus=str(path))
        first = translate_path(g, steps[0], seen)
        if isinstance(first, UnsupportedConstruct):
            return first
        if len(steps) == 1:
            return first
        note = f"sequence path {describe_path(g, path)} approximated by its first step"
        return replace(first, notes=first.notes + [note])

    inverse = g.value(path, SH.inversePath)
    if inverse is not None:
        inner = translate_path(g, inverse, seen)
        if isinstance(inner, UnsupportedConstruct):
            return inner
        return replace(inner, inverse=not inner.inverse)

    alternatives = g.value(path, SH.alternativePath)
    if alternatives is not None:
        try:
            options = g.items(alternatives)
        except UnsupportedConstruct as e:
            return e
        for option in options:
            chosen = translate_path(g, option, seen)
            if isinstance(chosen, PathTranslation):
                note = (f"alternative path {describe_path(g, path)} approximated by "
                        f"{describe_path(g, option)}")
                return replace(chosen, notes=chosen.notes + [note])
        return UnsupportedConstruct(
            "alternative path", "no alternative resolves to a predicate", focus=str(path)
        )

    one_or_more = g.value(path, SH.oneOrMorePath)
    if one_or_more is not None:
        inner = translate_path(g, one_or_more, seen)
        if isinstance(inner, UnsupportedConstruct):
            return inner
        return replace(inner, one_or_more=True)

    for predicate, name in ((SH.zeroOrMorePath, "zero-or-more"), (SH.zeroOrOnePath, "zero-or-one")):
        inner_path = g.value(path, predicate)
        if inner_path is not None:
            inner = translate_path(g, inner_path, seen)
            if isinstance(inner, UnsupportedConstruct):
                return inner
            note = f"{name} path {describe_path(g, path)} approximated by a single step"
            return replace(inner, notes=inner.notes + [note])

    return UnsupportedConstruct("property path", "unrecognised path form", focus=str(path))
