"""Serializers for ShEx (ShExC) and ShExJ formats."""
from shacl2shex.serializer.shex_serializer import serialize_shex
from shacl2shex.serializer.json_serializer import serialize_json
