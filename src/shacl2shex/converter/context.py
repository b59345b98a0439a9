"""Per-call conversion state."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger
from rdflib import URIRef

from shacl2shex.config import ConversionOptions
from shacl2shex.schema.shacl import Term
from shacl2shex.schema.shex import ShapeDecl, ShapeExpr, ShapeRef


@dataclass
class ConversionContext:
    """State owned by a single ``convert_shacl_to_shex`` call.

    ``memo`` maps a shape term to the reference under which it is (or will
    be) declared. It is filled before the shape's own constraints are
    translated, so a shape reached again through a cycle resolves to its
    reference instead of being translated a second time.
    """
    options: ConversionOptions = field(default_factory=ConversionOptions)
    target_classes: dict[str, str] = field(default_factory=dict)
    memo: dict[Term, ShapeRef] = field(default_factory=dict)
    inline_cache: dict[Term, Optional[ShapeExpr]] = field(default_factory=dict)
    in_progress: set[Term] = field(default_factory=set)
    declarations: dict[str, ShapeDecl] = field(default_factory=dict)
    pending: deque = field(default_factory=deque)
    warnings: list[str] = field(default_factory=list)
    _next_id: int = 0

    def warn(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)

    def generate_id(self) -> str:
        self._next_id += 1
        return f"_:shape{self._next_id}"

    def reference(self, term: Term) -> ShapeRef:
        """Return the reference for ``term``, queueing it for declaration once."""
        ref = self.memo.get(term)
        if ref is None:
            label = str(term) if isinstance(term, URIRef) else self.generate_id()
            ref = ShapeRef(label)
            self.memo[term] = ref
            self.pending.append(term)
        return ref
