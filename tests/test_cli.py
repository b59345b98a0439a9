"""Tests for the command-line interface."""
import json

import pytest
from loguru import logger

import main

SHAPES = """
@prefix sh: <http://www.w3.org/ns/shacl#> .
@prefix ex: <http://example.org/> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .

ex:PersonShape a sh:NodeShape ;
    sh:targetClass ex:Person ;
    sh:property [ sh:path ex:name ; sh:datatype xsd:string ; sh:minCount 1 ] ;
    sh:property [ sh:path ( ex:address ex:city ) ] .
"""


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()
    logger.disable("shacl2shex")


@pytest.fixture
def shapes_file(tmp_path):
    path = tmp_path / "person.ttl"
    path.write_text(SHAPES, encoding="utf-8")
    return path


def test_convert_to_file(shapes_file, tmp_path):
    out = tmp_path / "out" / "person.shex"
    main.main(["--input", str(shapes_file), "--output", str(out)])
    text = out.read_text(encoding="utf-8")
    assert "ex:PersonShape {" in text
    assert "ex:name xsd:string +" in text


def test_convert_to_stdout(shapes_file, capsys):
    main.main(["--input", str(shapes_file)])
    assert "PREFIX ex: <http://example.org/>" in capsys.readouterr().out


def test_json_format(shapes_file, tmp_path):
    out = tmp_path / "person.json"
    main.main(["--input", str(shapes_file), "--output", str(out), "--format", "shexj"])
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["shapes"][0]["id"] == "http://example.org/PersonShape"


def test_shapemap_written_next_to_output(shapes_file, tmp_path):
    out = tmp_path / "person.shex"
    main.main(["--input", str(shapes_file), "--output", str(out), "--shapemap"])
    shapemap = (tmp_path / "person.shapemap").read_text(encoding="utf-8")
    assert shapemap == "{FOCUS rdf:type ex:Person}@ex:PersonShape\n"


def test_shapemap_requires_output(shapes_file):
    with pytest.raises(SystemExit):
        main.main(["--input", str(shapes_file), "--shapemap"])


def test_no_annotations_flag(shapes_file):
    text = main.convert_file(str(shapes_file))
    assert "rdfs:comment" in text
    options = main.ConversionOptions(annotate=False)
    assert "rdfs:comment" not in main.convert_file(str(shapes_file), options=options)


def test_file_without_shapes_fails(tmp_path):
    path = tmp_path / "data.ttl"
    path.write_text("<http://example.org/a> <http://example.org/b> <http://example.org/c> .\n",
                    encoding="utf-8")
    with pytest.raises(main.InvalidInput, match="No shapes found"):
        main.convert_file(str(path))
    with pytest.raises(SystemExit) as exc:
        main.main(["--input", str(path)])
    assert exc.value.code == 1


def test_strict_flag_fails_on_unsupported(tmp_path):
    path = tmp_path / "bad.ttl"
    path.write_text(SHAPES.replace("sh:minCount 1", 'sh:minCount "one"'), encoding="utf-8")
    with pytest.raises(SystemExit):
        main.main(["--input", str(path), "--strict"])


def test_batch_conversion(shapes_file, tmp_path, capsys):
    (tmp_path / "broken.ttl").write_text("@prefix ex <oops", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    out_dir = tmp_path / "out"
    ok, fail = main.convert_batch(str(tmp_path), str(out_dir), shapemap=True)
    assert (ok, fail) == (1, 1)
    assert (out_dir / "person.shex").exists()
    assert (out_dir / "person.shapemap").exists()
    output = capsys.readouterr().out
    assert "OK  person.ttl -> person.shex" in output
    assert "FAIL broken.ttl" in output


def test_no_arguments_prints_help():
    with pytest.raises(SystemExit):
        main.main([])
