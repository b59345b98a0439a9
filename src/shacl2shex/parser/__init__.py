"""Parsers for SHACL shapes graphs and their facets."""
from shacl2shex.parser.shacl_parser import parse_shacl, parse_shacl_file
from shacl2shex.parser.facets import extract_facets
