"""Exceptions raised by the SHACL to ShEx translation."""
from __future__ import annotations

from typing import Optional


class Shacl2ShexError(Exception):
    pass


class InvalidInput(Shacl2ShexError):
    """The input is not a usable shapes graph; the whole conversion fails."""


class UnsupportedConstruct(Shacl2ShexError):
    """A SHACL construct has no ShEx representation.

    Raised (or returned, by the path translator) for a single property or
    shape; the converter drops the offending part and records a warning.
    """

    def __init__(self, construct: str, details: str = "", focus: Optional[str] = None):
        self.construct = construct
        self.details = details
        self.focus = focus
        super().__init__(self.describe())

    def describe(self) -> str:
        msg = f"Unsupported {self.construct}"
        if self.details:
            msg += f": {self.details}"
        if self.focus:
            msg += f" (at {self.focus})"
        return msg


class ConversionFailure(Shacl2ShexError):
    """Internal inconsistency detected while building the schema."""
