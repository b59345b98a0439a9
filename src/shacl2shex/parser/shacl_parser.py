"""Load SHACL shapes graphs with rdflib."""
from __future__ import annotations

import os
import re
from typing import Optional

from loguru import logger
from rdflib import Graph
from rdflib.util import guess_format

from shacl2shex.errors import InvalidInput
from shacl2shex.graph import ShapesGraph

_URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def parse_shacl(source: str, format: str = "turtle") -> ShapesGraph:
    """Parse a SHACL document (file path, URL or inline data) into a ShapesGraph.

    Args:
        source: File path, http(s)/file URL, or the document text itself.
        format: rdflib format name (default: turtle).

    Returns:
        ShapesGraph over the parsed triples.

    Raises:
        InvalidInput: when rdflib cannot parse the document.
    """
    g = Graph()
    is_location = _URL_RE.match(source) is not None or (
        "\n" not in source and os.path.exists(source)
    )
    try:
        if is_location:
            g.parse(source=source, format=format)
        else:
            g.parse(data=source, format=format)
    except Exception as e:
        raise InvalidInput(f"Could not parse shapes graph as {format}: {e}") from e

    logger.debug(f"Parsed {len(g)} triples ({format})")
    return ShapesGraph(g)


def parse_shacl_file(filepath: str, format: Optional[str] = None) -> ShapesGraph:
    """Parse a SHACL file, guessing the RDF format from its extension."""
    if not _URL_RE.match(filepath) and not os.path.exists(filepath):
        raise InvalidInput(f"Input does not exist: {filepath}")
    fmt = format or guess_format(filepath) or "turtle"
    return parse_shacl(filepath, format=fmt)
