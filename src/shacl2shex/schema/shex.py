"""ShEx abstract syntax (ShExJ 2.2 shaped dataclasses).

Shape expressions and triple expressions are closed sets of dataclasses so
that tree walkers can dispatch on the concrete type. Every node knows how to
render itself with ``to_dict()`` in the ShExJ JSON form.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union

from shacl2shex.schema.common import Prefix

SHEX_CONTEXT = "http://www.w3.org/ns/shex.jsonld"


def _json_number(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


@dataclass
class ObjectLiteral:
    """An RDF literal inside a value set or an annotation."""
    value: str
    type: Optional[str] = None
    language: Optional[str] = None

    def to_dict(self) -> dict:
        d: dict = {"value": self.value}
        if self.language:
            d["language"] = self.language
        elif self.type:
            d["type"] = self.type
        return d


@dataclass
class Language:
    """A language tag value set entry, e.g. ``@en``."""
    language_tag: str

    def to_dict(self) -> dict:
        return {"type": "Language", "languageTag": self.language_tag}


ValueSetValue = Union[str, ObjectLiteral, Language]


def _value_to_dict(value: ValueSetValue):
    if isinstance(value, str):
        return value
    return value.to_dict()


@dataclass
class Annotation:
    predicate: str
    object: Union[str, ObjectLiteral]

    def to_dict(self) -> dict:
        return {
            "type": "Annotation",
            "predicate": self.predicate,
            "object": _value_to_dict(self.object),
        }


@dataclass
class NodeConstraint:
    node_kind: Optional[str] = None  # iri | bnode | nonliteral | literal
    datatype: Optional[str] = None
    values: Optional[list[ValueSetValue]] = None
    pattern: Optional[str] = None
    flags: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_inclusive: Optional[Union[int, float, Decimal]] = None
    max_inclusive: Optional[Union[int, float, Decimal]] = None
    min_exclusive: Optional[Union[int, float, Decimal]] = None
    max_exclusive: Optional[Union[int, float, Decimal]] = None

    @property
    def is_empty(self) -> bool:
        return all(
            getattr(self, name) is None
            for name in self.__dataclass_fields__
        )

    def to_dict(self) -> dict:
        d: dict = {"type": "NodeConstraint"}
        if self.node_kind is not None:
            d["nodeKind"] = self.node_kind
        if self.datatype is not None:
            d["datatype"] = self.datatype
        if self.values is not None:
            d["values"] = [_value_to_dict(v) for v in self.values]
        if self.pattern is not None:
            d["pattern"] = self.pattern
            if self.flags:
                d["flags"] = self.flags
        if self.min_length is not None:
            d["minlength"] = self.min_length
        if self.max_length is not None:
            d["maxlength"] = self.max_length
        for key, value in (
            ("mininclusive", self.min_inclusive),
            ("maxinclusive", self.max_inclusive),
            ("minexclusive", self.min_exclusive),
            ("maxexclusive", self.max_exclusive),
        ):
            if value is not None:
                d[key] = _json_number(value)
        return d


@dataclass
class ShapeRef:
    """Weak reference to a shape declaration by identifier."""
    reference: str

    def to_dict(self) -> str:
        # ShExJ writes references as bare labels.
        return self.reference


@dataclass
class TripleConstraint:
    predicate: str
    value_expr: Optional["ShapeExpr"] = None
    min: Optional[int] = None
    max: Optional[int] = None  # UNBOUNDED = unlimited
    inverse: bool = False
    annotations: list[Annotation] = field(default_factory=list)

    def to_dict(self) -> dict:
        d: dict = {"type": "TripleConstraint"}
        if self.inverse:
            d["inverse"] = True
        d["predicate"] = self.predicate
        if self.value_expr is not None:
            d["valueExpr"] = self.value_expr.to_dict()
        if self.min is not None:
            d["min"] = self.min
        if self.max is not None:
            d["max"] = self.max
        if self.annotations:
            d["annotations"] = [a.to_dict() for a in self.annotations]
        return d


@dataclass
class EachOf:
    """Conjunction of triple expressions (;-separated in ShExC)."""
    expressions: list["TripleExpr"] = field(default_factory=list)
    min: Optional[int] = None
    max: Optional[int] = None

    def to_dict(self) -> dict:
        d: dict = {
            "type": "EachOf",
            "expressions": [e.to_dict() for e in self.expressions],
        }
        if self.min is not None:
            d["min"] = self.min
        if self.max is not None:
            d["max"] = self.max
        return d


@dataclass
class OneOf:
    """Disjunction of triple expressions (|-separated in ShExC)."""
    expressions: list["TripleExpr"] = field(default_factory=list)
    min: Optional[int] = None
    max: Optional[int] = None

    def to_dict(self) -> dict:
        d: dict = {
            "type": "OneOf",
            "expressions": [e.to_dict() for e in self.expressions],
        }
        if self.min is not None:
            d["min"] = self.min
        if self.max is not None:
            d["max"] = self.max
        return d


TripleExpr = Union[TripleConstraint, EachOf, OneOf]


@dataclass
class Shape:
    expression: Optional[TripleExpr] = None
    closed: bool = False
    extra: list[str] = field(default_factory=list)  # EXTRA predicates
    annotations: list[Annotation] = field(default_factory=list)

    def to_dict(self) -> dict:
        d: dict = {"type": "Shape"}
        if self.closed:
            d["closed"] = True
        if self.extra:
            d["extra"] = list(self.extra)
        if self.expression is not None:
            d["expression"] = self.expression.to_dict()
        if self.annotations:
            d["annotations"] = [a.to_dict() for a in self.annotations]
        return d


@dataclass
class ShapeAnd:
    shape_exprs: list["ShapeExpr"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": "ShapeAnd",
            "shapeExprs": [e.to_dict() for e in self.shape_exprs],
        }


@dataclass
class ShapeOr:
    shape_exprs: list["ShapeExpr"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": "ShapeOr",
            "shapeExprs": [e.to_dict() for e in self.shape_exprs],
        }


@dataclass
class ShapeNot:
    shape_expr: "ShapeExpr"

    def to_dict(self) -> dict:
        return {"type": "ShapeNot", "shapeExpr": self.shape_expr.to_dict()}


ShapeExpr = Union[NodeConstraint, Shape, ShapeAnd, ShapeOr, ShapeNot, ShapeRef]


@dataclass
class ShapeDecl:
    id: str
    shape_expr: ShapeExpr

    def to_dict(self) -> dict:
        return {
            "type": "ShapeDecl",
            "id": self.id,
            "shapeExpr": self.shape_expr.to_dict(),
        }


@dataclass
class Schema:
    shapes: list[ShapeDecl] = field(default_factory=list)
    prefixes: list[Prefix] = field(default_factory=list)

    def declared_ids(self) -> set[str]:
        return {decl.id for decl in self.shapes}

    def get(self, shape_id: str) -> Optional[ShapeDecl]:
        for decl in self.shapes:
            if decl.id == shape_id:
                return decl
        return None

    def to_dict(self) -> dict:
        d: dict = {"@context": SHEX_CONTEXT, "type": "Schema"}
        if self.shapes:
            d["shapes"] = [decl.to_dict() for decl in self.shapes]
        return d
