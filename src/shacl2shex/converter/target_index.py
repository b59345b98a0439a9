"""Index of target classes to the shapes that declare them."""
from __future__ import annotations

from typing import Callable

from loguru import logger
from rdflib import URIRef

from shacl2shex.graph import ShapesGraph
from shacl2shex.schema.shacl import SH, Term


def build_target_class_index(
    g: ShapesGraph,
    shapes: list[Term],
    label_of: Callable[[Term], str] = str,
) -> dict[str, str]:
    """Map each target class IRI to the identifier of its declaring shape.

    ``sh:targetClass C`` maps C; a shape that is itself an ``rdfs:Class``
    maps its own IRI. When several shapes target the same class the last
    one seen wins.
    """
    index: dict[str, str] = {}
    for shape in shapes:
        shape_id = label_of(shape)
        classes = [c for c in g.objects(shape, SH.targetClass) if isinstance(c, URIRef)]
        if g.is_implicit_class_target(shape):
            classes.append(shape)
        for cls in classes:
            previous = index.get(str(cls))
            if previous is not None and previous != shape_id:
                logger.debug(f"Class {cls} targeted by {previous} and {shape_id}; using {shape_id}")
            index[str(cls)] = shape_id
    return index
