"""Serialize a ShEx schema to ShExJ."""
from __future__ import annotations

import json

from shacl2shex.schema.shex import Schema


def serialize_json(schema: Schema) -> str:
    """Serialize a schema to a ShExJ (JSON-LD) string.

    Args:
        schema: The ShEx schema to serialize.

    Returns:
        Pretty-printed JSON string.
    """
    return json.dumps(schema.to_dict(), indent=2, ensure_ascii=False)
