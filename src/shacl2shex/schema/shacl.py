"""SHACL vocabulary and the facet bundle read from a shape node."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from rdflib import BNode, Literal, Namespace, URIRef

from shacl2shex.schema.common import NodeKind

SH = Namespace("http://www.w3.org/ns/shacl#")

Term = Union[URIRef, BNode, Literal]

NODE_KIND_MAP = {
    SH.IRI: NodeKind.IRI,
    SH.BlankNode: NodeKind.BLANK_NODE,
    SH.Literal: NodeKind.LITERAL,
    SH.BlankNodeOrIRI: NodeKind.BLANK_NODE_OR_IRI,
    SH.BlankNodeOrLiteral: NodeKind.BLANK_NODE_OR_LITERAL,
    SH.IRIOrLiteral: NodeKind.IRI_OR_LITERAL,
}

TARGET_PREDICATES = (
    SH.targetClass,
    SH.targetNode,
    SH.targetSubjectsOf,
    SH.targetObjectsOf,
)


@dataclass
class SparqlConstraint:
    query: str
    kind: str = "select"  # select | ask
    message: Optional[str] = None


@dataclass
class Facets:
    """Everything the translator reads from a single shape node.

    Scalar facets hold rdflib terms as found in the graph; list-valued
    facets keep input order. ``None`` means "not declared".
    """
    datatype: Optional[URIRef] = None
    node_kind: Optional[NodeKind] = None
    classes: list[URIRef] = field(default_factory=list)
    pattern: Optional[str] = None
    flags: Optional[str] = None
    min_count: Optional[int] = None
    max_count: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_inclusive: Optional[Literal] = None
    max_inclusive: Optional[Literal] = None
    min_exclusive: Optional[Literal] = None
    max_exclusive: Optional[Literal] = None
    in_values: Optional[list[Term]] = None
    has_values: list[Term] = field(default_factory=list)
    language_in: Optional[list[str]] = None
    unique_lang: bool = False
    nodes: list[Term] = field(default_factory=list)
    and_lists: list[list[Term]] = field(default_factory=list)
    or_lists: list[list[Term]] = field(default_factory=list)
    xone_lists: list[list[Term]] = field(default_factory=list)
    not_shapes: list[Term] = field(default_factory=list)
    closed: bool = False
    ignored_properties: list[URIRef] = field(default_factory=list)
    deactivated: bool = False
    equals: list[URIRef] = field(default_factory=list)
    disjoint: list[URIRef] = field(default_factory=list)
    less_than: list[URIRef] = field(default_factory=list)
    less_than_or_equals: list[URIRef] = field(default_factory=list)
    qualified_value_shape: Optional[Term] = None
    qualified_min_count: Optional[int] = None
    qualified_max_count: Optional[int] = None
    qualified_value_shapes_disjoint: bool = False
    sparql: list[SparqlConstraint] = field(default_factory=list)

    @property
    def has_logical(self) -> bool:
        return bool(self.and_lists or self.or_lists or self.xone_lists or self.not_shapes)

    @property
    def has_value_constraints(self) -> bool:
        """True when any facet restricts the value nodes themselves."""
        return bool(
            self.datatype is not None
            or self.node_kind is not None
            or self.classes
            or self.nodes
            or self.in_values is not None
            or self.has_values
            or self.language_in is not None
            or self.pattern is not None
            or self.min_length is not None
            or self.max_length is not None
            or self.min_inclusive is not None
            or self.max_inclusive is not None
            or self.min_exclusive is not None
            or self.max_exclusive is not None
            or self.has_logical
        )

    @property
    def property_pairs(self) -> list[tuple[str, list[URIRef]]]:
        return [
            (name, values)
            for name, values in (
                ("equals", self.equals),
                ("disjoint", self.disjoint),
                ("lessThan", self.less_than),
                ("lessThanOrEquals", self.less_than_or_equals),
            )
            if values
        ]
