"""Serialize a ShEx schema to ShExC compact syntax."""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional, Union

from shacl2shex.schema.common import Cardinality, Prefix
from shacl2shex.schema.shex import (
    Annotation,
    EachOf,
    Language,
    NodeConstraint,
    ObjectLiteral,
    OneOf,
    Schema,
    Shape,
    ShapeAnd,
    ShapeExpr,
    ShapeNot,
    ShapeOr,
    ShapeRef,
    TripleConstraint,
    TripleExpr,
    ValueSetValue,
)

RDF_TYPE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"
XSD_STRING = "http://www.w3.org/2001/XMLSchema#string"

_LOCAL_NAME = re.compile(r"^([A-Za-z0-9_]([A-Za-z0-9_.-]*[A-Za-z0-9_-])?)?$")

_NODE_KINDS = {
    "iri": "IRI",
    "bnode": "BNODE",
    "nonliteral": "NONLITERAL",
    "literal": "LITERAL",
}

_STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


class PrefixMap:
    """Manages IRI-to-prefixed-name resolution."""

    def __init__(self, prefixes: list[Prefix]):
        # Sort by longest IRI first to get most specific match
        self.entries = sorted(
            [(p.name, p.iri) for p in prefixes],
            key=lambda x: -len(x[1]),
        )

    def compact(self, iri: str) -> str:
        """Try to compact a full IRI to prefixed name."""
        for name, prefix_iri in self.entries:
            if iri.startswith(prefix_iri):
                local = iri[len(prefix_iri):]
                if _LOCAL_NAME.match(local):
                    return f"{name}:{local}"
        return f"<{iri}>"

    def label(self, shape_id: str) -> str:
        """Shape label: blank node labels are written as-is."""
        if shape_id.startswith("_:"):
            return shape_id
        return self.compact(shape_id)

    def predicate(self, iri: str) -> str:
        return "a" if iri == RDF_TYPE else self.compact(iri)


def _escape_string(value: str) -> str:
    return "".join(_STRING_ESCAPES.get(ch, ch) for ch in value)


def _serialize_number(value: Union[int, float, Decimal]) -> str:
    return str(value)


def serialize_literal(lit: ObjectLiteral, pm: PrefixMap) -> str:
    s = f'"{_escape_string(lit.value)}"'
    if lit.language:
        s += f"@{lit.language}"
    elif lit.type and lit.type != XSD_STRING:
        s += f"^^{pm.compact(lit.type)}"
    return s


def _serialize_value_set_value(v: ValueSetValue, pm: PrefixMap) -> str:
    """Serialize a single value set entry."""
    if isinstance(v, Language):
        return f"@{v.language_tag}"
    if isinstance(v, ObjectLiteral):
        return serialize_literal(v, pm)
    return pm.compact(v)


def _serialize_pattern(pattern: str, flags: Optional[str]) -> str:
    body = pattern.replace("/", "\\/").replace("\n", "\\n").replace("\r", "\\r")
    return f"/{body}/{flags or ''}"


def _node_constraint_parts(nc: NodeConstraint, pm: PrefixMap) -> list[str]:
    """One ShExC node constraint per entry; several are joined with AND."""
    primaries: list[str] = []
    if nc.node_kind is not None:
        primaries.append(_NODE_KINDS[nc.node_kind])
    if nc.datatype is not None:
        primaries.append(pm.compact(nc.datatype))
    if nc.values is not None:
        items = " ".join(_serialize_value_set_value(v, pm) for v in nc.values)
        primaries.append(f"[ {items} ]" if items else "[]")

    facets: list[str] = []
    if nc.pattern is not None:
        facets.append(_serialize_pattern(nc.pattern, nc.flags))
    if nc.min_length is not None:
        facets.append(f"MINLENGTH {nc.min_length}")
    if nc.max_length is not None:
        facets.append(f"MAXLENGTH {nc.max_length}")
    for keyword, bound in (
        ("MININCLUSIVE", nc.min_inclusive),
        ("MAXINCLUSIVE", nc.max_inclusive),
        ("MINEXCLUSIVE", nc.min_exclusive),
        ("MAXEXCLUSIVE", nc.max_exclusive),
    ):
        if bound is not None:
            facets.append(f"{keyword} {_serialize_number(bound)}")

    if not primaries:
        return [" ".join(facets) if facets else "."]
    if facets:
        primaries[-1] += " " + " ".join(facets)
    return primaries


def _serialize_annotations(annotations: list[Annotation], pm: PrefixMap) -> str:
    parts = []
    for a in annotations:
        obj = a.object
        rendered = serialize_literal(obj, pm) if isinstance(obj, ObjectLiteral) else pm.compact(obj)
        parts.append(f" // {pm.predicate(a.predicate)} {rendered}")
    return "".join(parts)


def _serialize_triple_constraint(tc: TripleConstraint, pm: PrefixMap, indent: int) -> str:
    """Serialize a single triple constraint."""
    pad = "  " * indent
    pred = ("^" if tc.inverse else "") + pm.predicate(tc.predicate)
    value = _serialize_atom(tc.value_expr, pm, indent) if tc.value_expr is not None else "."
    card = Cardinality(tc.min, tc.max).to_shex_string()
    return f"{pad}{pred} {value}{card}{_serialize_annotations(tc.annotations, pm)}"


def _serialize_expression(expr: TripleExpr, pm: PrefixMap, indent: int) -> str:
    """Serialize a triple expression."""
    if isinstance(expr, TripleConstraint):
        return _serialize_triple_constraint(expr, pm, indent)

    separator = " ;\n" if isinstance(expr, EachOf) else " |\n"
    lines = []
    for sub in expr.expressions:
        if isinstance(sub, (EachOf, OneOf)) and type(sub) is not type(expr):
            pad = "  " * (indent + 1)
            inner = _serialize_expression(sub, pm, indent + 1)
            lines.append(f"{pad[:-2]}(\n{inner}\n{pad[:-2]})")
        else:
            lines.append(_serialize_expression(sub, pm, indent))
    body = separator.join(lines)
    card = Cardinality(expr.min, expr.max).to_shex_string() if (
        expr.min is not None or expr.max is not None) else ""
    if card:
        pad = "  " * indent
        return f"{pad}(\n{body}\n{pad}){card}"
    return body


def _serialize_shape(shape: Shape, pm: PrefixMap, indent: int) -> str:
    modifiers = []
    if shape.extra:
        modifiers.append("EXTRA " + " ".join(pm.predicate(e) for e in shape.extra))
    if shape.closed:
        modifiers.append("CLOSED")
    prefix = " ".join(modifiers + ["{"])

    if shape.expression is None:
        text = prefix + " }"
    else:
        body = _serialize_expression(shape.expression, pm, indent + 1)
        text = f"{prefix}\n{body}\n{'  ' * indent}}}"
    return text + _serialize_annotations(shape.annotations, pm)


def _is_compound(expr: ShapeExpr) -> bool:
    if isinstance(expr, (ShapeAnd, ShapeOr, ShapeNot)):
        return True
    return isinstance(expr, NodeConstraint) and len(_node_constraint_parts(expr, PrefixMap([]))) > 1


def _serialize_atom(expr: ShapeExpr, pm: PrefixMap, indent: int) -> str:
    """Serialize ``expr``, parenthesized unless it is a single atom."""
    text = _serialize_shape_expr(expr, pm, indent)
    return f"({text})" if _is_compound(expr) else text


def _serialize_shape_expr(expr: ShapeExpr, pm: PrefixMap, indent: int = 0) -> str:
    if isinstance(expr, ShapeRef):
        return "@" + pm.label(expr.reference)
    if isinstance(expr, NodeConstraint):
        return " AND ".join(_node_constraint_parts(expr, pm))
    if isinstance(expr, Shape):
        return _serialize_shape(expr, pm, indent)
    if isinstance(expr, ShapeAnd):
        return " AND ".join(_serialize_atom(e, pm, indent) for e in expr.shape_exprs)
    if isinstance(expr, ShapeOr):
        return " OR ".join(_serialize_atom(e, pm, indent) for e in expr.shape_exprs)
    if isinstance(expr, ShapeNot):
        return "NOT " + _serialize_atom(expr.shape_expr, pm, indent)
    raise TypeError(f"Unexpected shape expression {type(expr).__name__}")


def serialize_shex(schema: Schema) -> str:
    """Serialize a Schema to ShExC compact syntax string.

    Args:
        schema: The ShEx schema to serialize.

    Returns:
        ShExC format string.
    """
    pm = PrefixMap(schema.prefixes)
    lines: list[str] = []

    # PREFIX declarations
    for pfx in schema.prefixes:
        lines.append(f"PREFIX {pfx.name}: <{pfx.iri}>")

    if schema.prefixes:
        lines.append("")

    # Shape declarations
    for decl in schema.shapes:
        lines.append(f"{pm.label(decl.id)} {_serialize_shape_expr(decl.shape_expr, pm)}")
        lines.append("")

    return "\n".join(lines)
