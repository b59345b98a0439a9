"""AND / OR / NOT / XONE over ShEx shape expressions.

ShEx has no exclusive-or. ``exactly_one`` encodes it with the other three
operators::

    XONE(B1..Bn) = OR_i ( Bi AND NOT OR_{j != i} Bj )

which holds iff exactly one branch holds. The ShExJ grammar requires at
least two operands for ShapeAnd/ShapeOr, so single operands collapse to the
operand itself.
"""
from __future__ import annotations

from typing import Optional

from shacl2shex.schema.shex import ShapeAnd, ShapeExpr, ShapeNot, ShapeOr


def conjoin(exprs: list[Optional[ShapeExpr]]) -> Optional[ShapeExpr]:
    operands = [e for e in exprs if e is not None]
    if not operands:
        return None
    if len(operands) == 1:
        return operands[0]
    return ShapeAnd(shape_exprs=operands)


def disjoin(exprs: list[Optional[ShapeExpr]]) -> Optional[ShapeExpr]:
    operands = [e for e in exprs if e is not None]
    if not operands:
        return None
    if len(operands) == 1:
        return operands[0]
    return ShapeOr(shape_exprs=operands)


def negate(expr: ShapeExpr) -> ShapeExpr:
    return ShapeNot(shape_expr=expr)


def exactly_one(branches: list[ShapeExpr]) -> Optional[ShapeExpr]:
    """Exact exclusive-or of ``branches``."""
    if len(branches) < 2:
        return disjoin(branches)
    alternatives = []
    for i, branch in enumerate(branches):
        others = disjoin([b for j, b in enumerate(branches) if j != i])
        alternatives.append(ShapeAnd(shape_exprs=[branch, negate(others)]))
    return ShapeOr(shape_exprs=alternatives)
