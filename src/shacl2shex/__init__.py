"""shacl2shex: translate SHACL shapes graphs into ShEx schemas.

Companion to weso/shaclex (Scala reference implementation).
"""
__version__ = "0.1.0"

from loguru import logger

from shacl2shex.config import ConversionOptions
from shacl2shex.errors import (
    ConversionFailure,
    InvalidInput,
    Shacl2ShexError,
    UnsupportedConstruct,
)
from shacl2shex.graph import ShapesGraph
from shacl2shex.schema.common import UNBOUNDED, Cardinality, NodeKind, Prefix
from shacl2shex.schema.shacl import Facets
from shacl2shex.schema.shex import Schema, Shape, ShapeDecl, TripleConstraint

from shacl2shex.parser.shacl_parser import parse_shacl, parse_shacl_file
from shacl2shex.parser.facets import extract_facets

from shacl2shex.converter.shacl_to_shex import ConversionResult, convert_shacl_to_shex

from shacl2shex.serializer.shex_serializer import serialize_shex
from shacl2shex.serializer.json_serializer import serialize_json

from shacl2shex.shapemap import ShapeMapEntry, shape_map_from_graph, write_shape_map

# Library code stays silent unless the application enables it.
logger.disable("shacl2shex")

__all__ = [
    # Options and errors
    "ConversionOptions",
    "Shacl2ShexError", "InvalidInput", "UnsupportedConstruct", "ConversionFailure",
    # Schema
    "ShapesGraph", "Facets",
    "UNBOUNDED", "Cardinality", "NodeKind", "Prefix",
    "Schema", "Shape", "ShapeDecl", "TripleConstraint",
    # Parsers
    "parse_shacl", "parse_shacl_file", "extract_facets",
    # Converter
    "convert_shacl_to_shex", "ConversionResult",
    # Serializers
    "serialize_shex", "serialize_json",
    # Shape maps
    "ShapeMapEntry", "shape_map_from_graph", "write_shape_map",
]
