"""Conversion options."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConversionOptions:
    # Attach rdfs:comment annotations describing degraded SHACL semantics.
    annotate: bool = True
    # Re-raise UnsupportedConstruct instead of dropping the offending part.
    strict: bool = False
    # Encode sh:xone exactly with AND/NOT; False falls back to a plain OR.
    exact_xone: bool = True
