"""Tests for ShExC and ShExJ serialization."""
import json

from shacl2shex.converter.shacl_to_shex import convert_shacl_to_shex
from shacl2shex.converter.values import comment
from shacl2shex.parser.shacl_parser import parse_shacl
from shacl2shex.schema.common import UNBOUNDED, Prefix
from shacl2shex.schema.shex import (
    EachOf,
    Language,
    NodeConstraint,
    ObjectLiteral,
    Schema,
    Shape,
    ShapeAnd,
    ShapeDecl,
    ShapeNot,
    ShapeOr,
    ShapeRef,
    TripleConstraint,
)
from shacl2shex.serializer.json_serializer import serialize_json
from shacl2shex.serializer.shex_serializer import PrefixMap, serialize_shex

EX = "http://example.org/"
XSD = "http://www.w3.org/2001/XMLSchema#"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"

PREFIXES = [Prefix("ex", EX), Prefix("xsd", XSD), Prefix("rdfs", RDFS)]


def _shexc(shape_expr, shape_id=EX + "S"):
    schema = Schema(shapes=[ShapeDecl(shape_id, shape_expr)], prefixes=PREFIXES)
    return serialize_shex(schema)


def _body(shape_expr, shape_id=EX + "S"):
    """The declaration text, without PREFIX lines."""
    return _shexc(shape_expr, shape_id).split("\n\n", 1)[1].strip()


def test_prefix_map_compacts_longest_match():
    pm = PrefixMap([Prefix("ex", EX), Prefix("exv", EX + "vocab/")])
    assert pm.compact(EX + "vocab/name") == "exv:name"
    assert pm.compact(EX + "Person") == "ex:Person"
    assert pm.compact("http://other.org/x") == "<http://other.org/x>"


def test_prefix_map_keeps_unsafe_local_names_absolute():
    pm = PrefixMap([Prefix("ex", EX)])
    assert pm.compact(EX + "a/b") == "<http://example.org/a/b>"
    assert pm.label("_:shape1") == "_:shape1"


def test_full_schema():
    shape = Shape(
        expression=EachOf(expressions=[
            TripleConstraint(predicate=EX + "name",
                             value_expr=NodeConstraint(datatype=XSD + "string"), min=1, max=1),
            TripleConstraint(predicate=EX + "age",
                             value_expr=NodeConstraint(datatype=XSD + "integer", min_inclusive=0),
                             min=0, max=1),
        ]),
        closed=True,
    )
    assert _shexc(shape) == (
        "PREFIX ex: <http://example.org/>\n"
        "PREFIX xsd: <http://www.w3.org/2001/XMLSchema#>\n"
        "PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>\n"
        "\n"
        "ex:S CLOSED {\n"
        "  ex:name xsd:string ;\n"
        "  ex:age xsd:integer MININCLUSIVE 0 ?\n"
        "}\n"
    )


def test_inverse_wildcard_and_cardinality():
    tc = TripleConstraint(predicate=EX + "child", min=2, max=UNBOUNDED, inverse=True)
    assert _body(Shape(expression=tc)) == "ex:S {\n  ^ex:child . {2,}\n}"


def test_star_and_plus_cardinalities():
    star = TripleConstraint(predicate=EX + "p", min=0, max=UNBOUNDED)
    plus = TripleConstraint(predicate=EX + "q", min=1, max=UNBOUNDED)
    body = _body(Shape(expression=EachOf(expressions=[star, plus])))
    assert "ex:p . *" in body
    assert "ex:q . +" in body


def test_rdf_type_is_written_as_a():
    shape = Shape(
        expression=TripleConstraint(
            predicate="http://www.w3.org/1999/02/22-rdf-syntax-ns#type",
            value_expr=NodeConstraint(values=[EX + "Person"]),
        ),
        extra=["http://www.w3.org/1999/02/22-rdf-syntax-ns#type"],
    )
    assert _body(shape) == "ex:S EXTRA a {\n  a [ ex:Person ]\n}"


def test_value_set_entries():
    nc = NodeConstraint(values=[
        EX + "a",
        ObjectLiteral(value="b"),
        ObjectLiteral(value="1", type=XSD + "integer"),
        ObjectLiteral(value="hi", language="en"),
        Language(language_tag="fr"),
    ])
    assert _body(nc) == 'ex:S [ ex:a "b" "1"^^xsd:integer "hi"@en @fr ]'


def test_string_facets():
    nc = NodeConstraint(pattern="^a/b", flags="i", min_length=1, max_length=5)
    assert _body(nc) == r"ex:S /^a\/b/i MINLENGTH 1 MAXLENGTH 5"


def test_node_kind_with_datatype_is_conjunction():
    nc = NodeConstraint(node_kind="literal", datatype=XSD + "string")
    assert _body(nc) == "ex:S LITERAL AND xsd:string"
    tc = TripleConstraint(predicate=EX + "p", value_expr=nc)
    assert "ex:p (LITERAL AND xsd:string)" in _body(Shape(expression=tc))


def test_logical_operators_are_parenthesized():
    a, b = ShapeRef(EX + "A"), ShapeRef(EX + "B")
    expr = ShapeOr(shape_exprs=[ShapeAnd(shape_exprs=[a, ShapeNot(shape_expr=b)]), b])
    assert _body(expr) == "ex:S (@ex:A AND (NOT @ex:B)) OR @ex:B"


def test_node_kind_and_closed_shape():
    expr = ShapeAnd(shape_exprs=[
        NodeConstraint(node_kind="iri"),
        Shape(expression=TripleConstraint(predicate=EX + "p"), closed=True),
    ])
    assert _body(expr).startswith("ex:S IRI AND CLOSED {")


def test_blank_node_labels():
    expr = Shape(expression=TripleConstraint(predicate=EX + "p", value_expr=ShapeRef("_:shape1")))
    assert "ex:p @_:shape1" in _body(expr)
    assert _body(Shape(), "_:shape1") == "_:shape1 { }"


def test_annotations_are_escaped():
    shape = Shape(annotations=[comment('say "hi"\nnow')])
    assert _body(shape) == 'ex:S { } // rdfs:comment "say \\"hi\\"\\nnow"'


def test_triple_constraint_annotations():
    tc = TripleConstraint(predicate=EX + "p", min=0, max=UNBOUNDED,
                          annotations=[comment("sh:uniqueLang true")])
    assert 'ex:p . * // rdfs:comment "sh:uniqueLang true"' in _body(Shape(expression=tc))


def test_nested_inline_shape_is_indented():
    inner = Shape(expression=TripleConstraint(predicate=EX + "q"))
    tc = TripleConstraint(predicate=EX + "p", value_expr=inner)
    assert _body(Shape(expression=tc)) == "ex:S {\n  ex:p {\n    ex:q .\n  }\n}"


def test_converted_schema_round_text():
    g = parse_shacl("""
    @prefix sh: <http://www.w3.org/ns/shacl#> .
    @prefix ex: <http://example.org/> .
    @prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
    ex:Old a sh:NodeShape ; sh:deactivated true .
    ex:S a sh:NodeShape ; sh:property [ sh:path ex:p ; sh:equals ex:p2 ] .
    """)
    text = serialize_shex(convert_shacl_to_shex(g).schema)
    assert "PREFIX ex: <http://example.org/>" in text
    assert 'ex:Old { } // rdfs:comment "sh:deactivated true"' in text
    assert 'ex:p . * // rdfs:comment "sh:equals <http://example.org/p2>"' in text


def test_json_output():
    tc = TripleConstraint(predicate=EX + "p", value_expr=ShapeRef(EX + "T"),
                          min=1, max=UNBOUNDED, inverse=True)
    schema = Schema(
        shapes=[
            ShapeDecl(EX + "S", Shape(expression=tc, closed=True)),
            ShapeDecl(EX + "T", NodeConstraint(datatype=XSD + "decimal", min_inclusive=1.5)),
        ],
        prefixes=PREFIXES,
    )
    data = json.loads(serialize_json(schema))
    assert data["@context"] == "http://www.w3.org/ns/shex.jsonld"
    assert data["type"] == "Schema"
    s, t = data["shapes"]
    assert s["type"] == "ShapeDecl"
    assert s["id"] == EX + "S"
    assert s["shapeExpr"] == {
        "type": "Shape",
        "closed": True,
        "expression": {
            "type": "TripleConstraint",
            "inverse": True,
            "predicate": EX + "p",
            "valueExpr": EX + "T",
            "min": 1,
            "max": -1,
        },
    }
    assert t["shapeExpr"] == {
        "type": "NodeConstraint", "datatype": XSD + "decimal", "mininclusive": 1.5,
    }


def test_json_logical_and_annotations():
    expr = ShapeNot(shape_expr=ShapeOr(shape_exprs=[ShapeRef("_:a"), ShapeRef("_:b")]))
    schema = Schema(shapes=[
        ShapeDecl(EX + "S", expr),
        ShapeDecl("_:a", Shape(annotations=[comment("x")])),
        ShapeDecl("_:b", Shape()),
    ])
    data = json.loads(serialize_json(schema))
    assert data["shapes"][0]["shapeExpr"] == {
        "type": "ShapeNot",
        "shapeExpr": {"type": "ShapeOr", "shapeExprs": ["_:a", "_:b"]},
    }
    assert data["shapes"][1]["shapeExpr"]["annotations"] == [{
        "type": "Annotation",
        "predicate": RDFS + "comment",
        "object": {"value": "x"},
    }]
