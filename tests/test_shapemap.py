"""Tests for shape maps built from SHACL targets."""
from rdflib import RDF, URIRef

from shacl2shex.converter.shacl_to_shex import convert_shacl_to_shex
from shacl2shex.parser.shacl_parser import parse_shacl
from shacl2shex.shapemap import ShapeMapEntry, shape_map_from_graph, write_shape_map

EX = "http://example.org/"

PREFIXES = """
@prefix sh: <http://www.w3.org/ns/shacl#> .
@prefix ex: <http://example.org/> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
"""

TTL = PREFIXES + """
ex:A a sh:NodeShape ; sh:targetClass ex:Person .
ex:B a sh:NodeShape ; sh:targetSubjectsOf ex:likes .
ex:C a sh:NodeShape ; sh:targetObjectsOf ex:knows .
ex:D a sh:NodeShape ; sh:targetNode ex:alice .
ex:Organization a sh:NodeShape, rdfs:Class .
ex:NoTargets a sh:NodeShape .
"""


def test_entries_per_target_kind():
    g = parse_shacl(TTL)
    entries = shape_map_from_graph(g)
    by_shape = {e.shape: e for e in entries}
    assert len(entries) == 5
    assert by_shape[EX + "A"] == ShapeMapEntry(shape=EX + "A", predicate=str(RDF.type),
                                               obj=EX + "Person")
    assert by_shape[EX + "B"] == ShapeMapEntry(shape=EX + "B", predicate=EX + "likes")
    assert by_shape[EX + "C"] == ShapeMapEntry(shape=EX + "C", predicate=EX + "knows",
                                               subject_focus=False)
    assert by_shape[EX + "D"] == ShapeMapEntry(shape=EX + "D", node=URIRef(EX + "alice"))


def test_written_shape_map():
    g = parse_shacl(TTL)
    text = write_shape_map(shape_map_from_graph(g), g.prefixes)
    assert set(text.splitlines()) == {
        "{FOCUS rdf:type ex:Person}@ex:A",
        "{FOCUS ex:likes _}@ex:B",
        "{_ ex:knows FOCUS}@ex:C",
        "ex:alice@ex:D",
        "{FOCUS rdf:type ex:Organization}@ex:Organization",
    }
    assert text.endswith("\n")


def test_blank_node_shape_uses_converter_label():
    g = parse_shacl(PREFIXES + "[] a sh:NodeShape ; sh:targetClass ex:Thing .")
    assert shape_map_from_graph(g) == []
    result = convert_shacl_to_shex(g)
    entries = shape_map_from_graph(g, result.labels)
    assert [e.shape for e in entries] == [result.schema.shapes[0].id]
    assert write_shape_map(entries, g.prefixes).startswith("{FOCUS rdf:type ex:Thing}@_:")


def test_literal_target_node():
    g = parse_shacl(PREFIXES + 'ex:S a sh:NodeShape ; sh:targetNode "x" .')
    assert write_shape_map(shape_map_from_graph(g), g.prefixes) == '"x"@ex:S\n'
