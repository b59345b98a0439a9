"""ShEx fixed shape maps built from SHACL target declarations.

SHACL binds shapes to focus nodes with targets; ShEx leaves that to a shape
map given at validation time. Each target becomes one entry:

    sh:targetClass C        ->  {FOCUS rdf:type C}@S
    sh:targetSubjectsOf p   ->  {FOCUS p _}@S
    sh:targetObjectsOf p    ->  {_ p FOCUS}@S
    sh:targetNode n         ->  n@S
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from rdflib import RDF, BNode, Literal, URIRef

from shacl2shex.converter.values import value_set_value
from shacl2shex.graph import ShapesGraph
from shacl2shex.schema.common import Prefix
from shacl2shex.schema.shacl import SH, Term
from shacl2shex.serializer.shex_serializer import PrefixMap, serialize_literal


@dataclass
class ShapeMapEntry:
    """One shape association.

    ``node`` is set for a fixed node (sh:targetNode). Otherwise ``predicate``
    and ``subject_focus`` describe a triple pattern: ``{FOCUS p o}`` when
    ``subject_focus`` is True, ``{s p FOCUS}`` when False. ``obj`` is the
    object of a subject-focused pattern, ``None`` for the wildcard ``_``.
    """
    shape: str
    node: Optional[Term] = None
    predicate: Optional[str] = None
    subject_focus: bool = True
    obj: Optional[str] = None


def _label(term: Term, labels: Optional[dict[Term, str]]) -> Optional[str]:
    if labels is not None and term in labels:
        return labels[term]
    if isinstance(term, URIRef):
        return str(term)
    return None


def shape_map_from_graph(
    g: ShapesGraph, labels: Optional[dict[Term, str]] = None
) -> list[ShapeMapEntry]:
    """Extract the target declarations of every shape as shape map entries.

    Args:
        g: The shapes graph.
        labels: Shape term to declared label, as returned by the converter.
            Without it blank node shapes cannot be named and are skipped.

    Returns:
        Entries in shape order, then target order.
    """
    entries: list[ShapeMapEntry] = []
    for shape in g.shape_terms():
        label = _label(shape, labels)
        if label is None:
            logger.debug(f"No label for shape {shape}; its targets are skipped")
            continue
        classes = [c for c in g.objects(shape, SH.targetClass) if isinstance(c, URIRef)]
        if g.is_implicit_class_target(shape):
            classes.append(shape)
        for cls in classes:
            entries.append(ShapeMapEntry(shape=label, predicate=str(RDF.type), obj=str(cls)))
        for node in g.objects(shape, SH.targetNode):
            if isinstance(node, BNode):
                logger.debug(f"Blank node target of {label} cannot appear in a shape map")
                continue
            entries.append(ShapeMapEntry(shape=label, node=node))
        for p in g.objects(shape, SH.targetSubjectsOf):
            entries.append(ShapeMapEntry(shape=label, predicate=str(p)))
        for p in g.objects(shape, SH.targetObjectsOf):
            entries.append(ShapeMapEntry(shape=label, predicate=str(p), subject_focus=False))
    return entries


def _serialize_node(node: Term, pm: PrefixMap) -> str:
    value = value_set_value(node)
    if isinstance(node, Literal):
        return serialize_literal(value, pm)
    return pm.compact(value)


def serialize_entry(entry: ShapeMapEntry, pm: PrefixMap) -> str:
    shape = "@" + pm.label(entry.shape)
    if entry.node is not None:
        return _serialize_node(entry.node, pm) + shape
    predicate = pm.compact(entry.predicate)
    if entry.subject_focus:
        obj = pm.compact(entry.obj) if entry.obj is not None else "_"
        return f"{{FOCUS {predicate} {obj}}}{shape}"
    return f"{{_ {predicate} FOCUS}}{shape}"


def write_shape_map(entries: list[ShapeMapEntry], prefixes: list[Prefix]) -> str:
    """Render entries one per line, compacting IRIs with ``prefixes``."""
    pm = PrefixMap(prefixes)
    return "".join(serialize_entry(e, pm) + "\n" for e in entries)
