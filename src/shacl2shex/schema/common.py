"""Shared types for the SHACL and ShEx models."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NodeKind(Enum):
    IRI = "IRI"
    BLANK_NODE = "BlankNode"
    LITERAL = "Literal"
    BLANK_NODE_OR_IRI = "BlankNodeOrIRI"
    BLANK_NODE_OR_LITERAL = "BlankNodeOrLiteral"
    IRI_OR_LITERAL = "IRIOrLiteral"

    @property
    def shex(self) -> str:
        """ShEx node kind keyword (lower case, as in ShExJ)."""
        return SHEX_NODE_KINDS[self]

    @property
    def is_approximated(self) -> bool:
        """True when ShEx has no single node kind with the same meaning."""
        return self in (NodeKind.BLANK_NODE_OR_LITERAL, NodeKind.IRI_OR_LITERAL)


# BlankNodeOrLiteral and IRIOrLiteral have no ShEx counterpart; both are
# widened to "literal".
SHEX_NODE_KINDS = {
    NodeKind.IRI: "iri",
    NodeKind.BLANK_NODE: "bnode",
    NodeKind.LITERAL: "literal",
    NodeKind.BLANK_NODE_OR_IRI: "nonliteral",
    NodeKind.BLANK_NODE_OR_LITERAL: "literal",
    NodeKind.IRI_OR_LITERAL: "literal",
}


UNBOUNDED = -1  # Sentinel for unbounded max cardinality


@dataclass
class Cardinality:
    min: Optional[int] = None   # None = not specified (use language default)
    max: Optional[int] = None   # None = not specified, UNBOUNDED = unlimited

    @property
    def effective_min(self) -> int:
        """Effective min for ShEx (default 1)."""
        return self.min if self.min is not None else 1

    @property
    def effective_max(self) -> Optional[int]:
        """Effective max for ShEx. Returns None for unbounded, int otherwise."""
        if self.max == UNBOUNDED:
            return None  # unbounded
        if self.max is None:
            return 1  # ShEx default
        return self.max

    def to_shex_string(self) -> str:
        mn = self.effective_min
        mx = self.effective_max  # None = unbounded
        if mn == 0 and mx is None:
            return " *"
        if mn == 0 and mx == 1:
            return " ?"
        if mn == 1 and mx is None:
            return " +"
        if mn == 1 and mx == 1:
            return ""
        if mx is None:
            return f" {{{mn},}}"
        if mn == mx:
            return f" {{{mn}}}"
        return f" {{{mn},{mx}}}"


@dataclass
class Prefix:
    name: str
    iri: str
