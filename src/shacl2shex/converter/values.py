"""Non-recursive parts of the value expression translation.

Builds the node constraint carried by scalar facets and the class checks
(a reference to the shape targeting the class, or an ``rdf:type`` test).
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

from rdflib import RDF, RDFS, XSD, Literal, URIRef

from shacl2shex.converter.context import ConversionContext
from shacl2shex.schema.common import NodeKind
from shacl2shex.schema.shacl import Facets, Term
from shacl2shex.schema.shex import (
    Annotation,
    Language,
    NodeConstraint,
    ObjectLiteral,
    Shape,
    ShapeAnd,
    ShapeExpr,
    ShapeRef,
    TripleConstraint,
    ValueSetValue,
)

RDF_TYPE = str(RDF.type)
RDFS_COMMENT = str(RDFS.comment)


def comment(text: str) -> Annotation:
    return Annotation(predicate=RDFS_COMMENT, object=ObjectLiteral(value=text))


def value_set_value(term: Term) -> Optional[ValueSetValue]:
    """Convert an RDF term into a ShEx value set entry (blank nodes have none)."""
    if isinstance(term, URIRef):
        return str(term)
    if isinstance(term, Literal):
        return ObjectLiteral(
            value=str(term),
            type=str(term.datatype) if term.datatype else None,
            language=term.language,
        )
    return None


def literal_datatype(term: Literal) -> URIRef:
    """Datatype of a literal, using RDF 1.1 defaults for plain literals."""
    if term.datatype is not None:
        return term.datatype
    return RDF.langString if term.language else XSD.string


def numeric_value(term: Literal) -> Optional[Union[int, float, Decimal]]:
    value = term.toPython()
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    return value


def class_expr(
    classes: list[URIRef],
    node_kind: Optional[NodeKind],
    target_classes: dict[str, str],
    owner: Optional[str] = None,
) -> ShapeExpr:
    """Translate ``sh:class``.

    A single class targeted by a declared shape becomes a reference to that
    shape. Anything else is checked through ``rdf:type``. A node kind on the
    same shape is kept alongside in a conjunction.
    """
    target = target_classes.get(str(classes[0])) if len(classes) == 1 else None
    if target is not None and target != owner:
        base: ShapeExpr = ShapeRef(target)
    else:
        base = Shape(
            expression=TripleConstraint(
                predicate=RDF_TYPE,
                value_expr=NodeConstraint(values=[str(c) for c in classes]),
            ),
        )
    if node_kind is not None:
        return ShapeAnd(shape_exprs=[NodeConstraint(node_kind=node_kind.shex), base])
    return base


def _value_set(values: list[Term], ctx: ConversionContext, focus: str) -> list[ValueSetValue]:
    converted = []
    for v in values:
        vs = value_set_value(v)
        if vs is None:
            ctx.warn(f"{focus}: blank node {v} cannot appear in a ShEx value set; skipped")
            continue
        converted.append(vs)
    return converted


def node_constraint(
    facets: Facets,
    ctx: ConversionContext,
    focus: str,
    include_node_kind: bool = True,
) -> Optional[NodeConstraint]:
    """NodeConstraint from the scalar facets, or None when none apply."""
    nc = NodeConstraint()

    if include_node_kind and facets.node_kind is not None:
        nc.node_kind = facets.node_kind.shex

    if facets.in_values is not None:
        members = facets.in_values
        datatypes = {literal_datatype(v) for v in members if isinstance(v, Literal)}
        if members and all(isinstance(v, Literal) for v in members) and len(datatypes) == 1:
            # Lossy: any literal of the shared datatype is accepted.
            nc.datatype = str(datatypes.pop())
            ctx.warn(f"{focus}: sh:in of {len(members)} literals collapsed to datatype {nc.datatype}")
        else:
            nc.values = _value_set(members, ctx, focus)

    if facets.datatype is not None:
        nc.datatype = str(facets.datatype)

    if facets.has_values:
        if nc.values is not None:
            ctx.warn(f"{focus}: sh:hasValue replaces the sh:in value set")
        nc.values = _value_set(facets.has_values, ctx, focus)

    if facets.language_in is not None:
        if nc.values is None:
            nc.values = [Language(language_tag=tag) for tag in facets.language_in]
        else:
            ctx.warn(f"{focus}: sh:languageIn dropped, a value set is already present")

    if facets.pattern is not None:
        nc.pattern = facets.pattern
        nc.flags = facets.flags
    nc.min_length = facets.min_length
    nc.max_length = facets.max_length

    for attr, name in (
        ("min_inclusive", "sh:minInclusive"),
        ("max_inclusive", "sh:maxInclusive"),
        ("min_exclusive", "sh:minExclusive"),
        ("max_exclusive", "sh:maxExclusive"),
    ):
        bound = getattr(facets, attr)
        if bound is None:
            continue
        number = numeric_value(bound)
        if number is None:
            ctx.warn(f"{focus}: non-numeric {name} {bound!r} has no ShEx equivalent; dropped")
            continue
        setattr(nc, attr, number)

    return None if nc.is_empty else nc
