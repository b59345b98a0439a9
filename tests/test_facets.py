"""Tests for reading SHACL facets from shape nodes."""
import pytest
from rdflib import XSD, Literal, URIRef

from shacl2shex.errors import UnsupportedConstruct
from shacl2shex.parser.facets import extract_facets
from shacl2shex.parser.shacl_parser import parse_shacl
from shacl2shex.schema.common import NodeKind
from shacl2shex.schema.shacl import SH

EX = "http://example.org/"

PREFIXES = """
@prefix sh: <http://www.w3.org/ns/shacl#> .
@prefix ex: <http://example.org/> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .
"""


def _facets(body, subject="ex:p"):
    g = parse_shacl(PREFIXES + body)
    return extract_facets(g, URIRef(EX + subject.split(":")[1]))


def test_scalar_facets():
    f = _facets("""
    ex:p sh:path ex:age ;
        sh:datatype xsd:integer ;
        sh:nodeKind sh:Literal ;
        sh:minCount 1 ;
        sh:maxCount 2 ;
        sh:minInclusive 0 ;
        sh:maxExclusive 150 ;
        sh:pattern "^[0-9]+$" ;
        sh:flags "i" ;
        sh:minLength 1 ;
        sh:maxLength 3 .
    """)
    assert f.datatype == XSD.integer
    assert f.node_kind is NodeKind.LITERAL
    assert f.min_count == 1
    assert f.max_count == 2
    assert f.min_inclusive == Literal(0)
    assert f.max_exclusive == Literal(150)
    assert f.pattern == "^[0-9]+$"
    assert f.flags == "i"
    assert (f.min_length, f.max_length) == (1, 3)
    assert f.has_value_constraints


def test_absent_facets_are_none():
    f = _facets("ex:p sh:path ex:name .")
    assert f.datatype is None
    assert f.min_count is None
    assert f.in_values is None
    assert f.language_in is None
    assert not f.has_value_constraints


def test_list_facets_keep_order():
    f = _facets("""
    ex:p sh:path ex:color ;
        sh:in ( ex:Red ex:Green ex:Blue ) ;
        sh:languageIn ( "en" "fr" ) .
    """)
    assert f.in_values == [URIRef(EX + "Red"), URIRef(EX + "Green"), URIRef(EX + "Blue")]
    assert f.language_in == ["en", "fr"]


def test_class_with_or():
    f = _facets("""
    ex:p sh:path ex:owner ;
        sh:class [ sh:or ( ex:Person ex:Organization ) ] .
    """)
    assert f.classes == [URIRef(EX + "Person"), URIRef(EX + "Organization")]


def test_logical_lists():
    f = _facets("""
    ex:p sh:path ex:v ;
        sh:or ( ex:A ex:B ) ;
        sh:xone ( ex:C ex:D ex:E ) ;
        sh:not ex:F .
    """)
    assert f.or_lists == [[URIRef(EX + "A"), URIRef(EX + "B")]]
    assert f.xone_lists == [[URIRef(EX + "C"), URIRef(EX + "D"), URIRef(EX + "E")]]
    assert f.not_shapes == [URIRef(EX + "F")]
    assert f.has_logical


def test_closed_and_deactivated():
    f = _facets("""
    ex:S a sh:NodeShape ;
        sh:closed true ;
        sh:ignoredProperties ( ex:a ex:b ) ;
        sh:deactivated true .
    """, subject="ex:S")
    assert f.closed
    assert f.ignored_properties == [URIRef(EX + "a"), URIRef(EX + "b")]
    assert f.deactivated


def test_property_pairs():
    f = _facets("""
    ex:p sh:path ex:start ;
        sh:lessThan ex:end ;
        sh:equals ex:begin .
    """)
    assert f.property_pairs == [
        ("equals", [URIRef(EX + "begin")]),
        ("lessThan", [URIRef(EX + "end")]),
    ]
    assert not f.has_value_constraints


def test_qualified_facets():
    f = _facets("""
    ex:p sh:path ex:member ;
        sh:qualifiedValueShape ex:PersonShape ;
        sh:qualifiedMinCount 2 ;
        sh:qualifiedMaxCount 5 ;
        sh:qualifiedValueShapesDisjoint true .
    """)
    assert f.qualified_value_shape == URIRef(EX + "PersonShape")
    assert (f.qualified_min_count, f.qualified_max_count) == (2, 5)
    assert f.qualified_value_shapes_disjoint


def test_sparql_constraint():
    f = _facets("""
    ex:S a sh:NodeShape ;
        sh:sparql [ sh:select "SELECT $this WHERE { }" ; sh:message "bad" ] .
    """, subject="ex:S")
    assert len(f.sparql) == 1
    assert f.sparql[0].kind == "select"
    assert f.sparql[0].message == "bad"


def test_non_integer_count_is_unsupported():
    with pytest.raises(UnsupportedConstruct):
        _facets('ex:p sh:path ex:age ; sh:minCount "one" .')


def test_unknown_node_kind_is_unsupported():
    with pytest.raises(UnsupportedConstruct):
        _facets("ex:p sh:path ex:age ; sh:nodeKind ex:Whatever .")


def test_non_literal_bound_is_unsupported():
    with pytest.raises(UnsupportedConstruct):
        _facets("ex:p sh:path ex:age ; sh:minInclusive ex:zero .")


def test_sh_namespace():
    assert str(SH.path) == "http://www.w3.org/ns/shacl#path"
