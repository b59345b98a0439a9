"""Data models for SHACL facets and the ShEx abstract syntax."""
from shacl2shex.schema.common import UNBOUNDED, Cardinality, NodeKind, Prefix
from shacl2shex.schema.shacl import SH, Facets, SparqlConstraint
from shacl2shex.schema.shex import Schema, Shape, ShapeDecl, TripleConstraint
