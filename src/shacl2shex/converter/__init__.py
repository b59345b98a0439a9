"""Converter from SHACL shapes graphs to ShEx schemas."""
from shacl2shex.converter.shacl_to_shex import ConversionResult, convert_shacl_to_shex
