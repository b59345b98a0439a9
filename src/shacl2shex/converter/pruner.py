"""Remove references to shapes that were never declared.

The pass rebuilds every declaration's expression tree. A reference to an
undeclared label is neutralized according to where it sits:

* inside ShapeAnd / ShapeOr: the operand is dropped, and a combinator
  left without operands is itself neutralized by its own position;
* under ShapeNot: the negation is replaced by an empty Shape;
* as a TripleConstraint value: the value becomes the wildcard and the
  cardinality is kept;
* as a whole declaration: the declaration becomes an empty Shape.

An empty Shape without CLOSED accepts any node, so it never rejects data
the original reference would have accepted.
"""
from __future__ import annotations

from typing import Callable, Optional

from shacl2shex.converter.logical import conjoin, disjoin
from shacl2shex.errors import ConversionFailure
from shacl2shex.schema.shex import (
    EachOf,
    NodeConstraint,
    OneOf,
    Schema,
    Shape,
    ShapeAnd,
    ShapeDecl,
    ShapeExpr,
    ShapeNot,
    ShapeOr,
    ShapeRef,
    TripleConstraint,
    TripleExpr,
)

Warn = Callable[[str], None]


class _Pruner:
    def __init__(self, declared: set[str], warn: Warn):
        self.declared = declared
        self.warn = warn
        self.owner = ""

    def _dangling(self, ref: ShapeRef, position: str) -> None:
        self.warn(f"{self.owner}: reference to undeclared shape {ref.reference} "
                  f"removed from {position}")

    def shape_expr(self, expr: ShapeExpr, position: str) -> Optional[ShapeExpr]:
        """Pruned copy of ``expr``; None when nothing of it survives."""
        if isinstance(expr, ShapeRef):
            if expr.reference in self.declared:
                return expr
            self._dangling(expr, position)
            return None
        if isinstance(expr, NodeConstraint):
            return expr
        if isinstance(expr, Shape):
            return Shape(
                expression=self.triple_expr(expr.expression) if expr.expression else None,
                closed=expr.closed,
                extra=list(expr.extra),
                annotations=list(expr.annotations),
            )
        if isinstance(expr, ShapeAnd):
            kept = [self.shape_expr(e, "a conjunction") for e in expr.shape_exprs]
            return conjoin(kept)
        if isinstance(expr, ShapeOr):
            kept = [self.shape_expr(e, "a disjunction") for e in expr.shape_exprs]
            return disjoin(kept)
        if isinstance(expr, ShapeNot):
            inner = self.shape_expr(expr.shape_expr, "a negation")
            return ShapeNot(shape_expr=inner) if inner is not None else Shape()
        raise ConversionFailure(f"Unexpected shape expression {type(expr).__name__}")

    def triple_expr(self, expr: TripleExpr) -> TripleExpr:
        if isinstance(expr, TripleConstraint):
            value_expr = expr.value_expr
            if value_expr is not None:
                value_expr = self.shape_expr(value_expr, f"the value of {expr.predicate}")
            return TripleConstraint(
                predicate=expr.predicate,
                value_expr=value_expr,
                min=expr.min,
                max=expr.max,
                inverse=expr.inverse,
                annotations=list(expr.annotations),
            )
        if isinstance(expr, EachOf):
            return EachOf(expressions=[self.triple_expr(e) for e in expr.expressions],
                          min=expr.min, max=expr.max)
        if isinstance(expr, OneOf):
            return OneOf(expressions=[self.triple_expr(e) for e in expr.expressions],
                         min=expr.min, max=expr.max)
        raise ConversionFailure(f"Unexpected triple expression {type(expr).__name__}")

    def decl(self, decl: ShapeDecl) -> ShapeDecl:
        self.owner = decl.id
        expr = self.shape_expr(decl.shape_expr, "the declaration")
        return ShapeDecl(id=decl.id, shape_expr=expr if expr is not None else Shape())


def prune_dangling_references(schema: Schema, warn: Warn) -> Schema:
    """Return a copy of ``schema`` in which every ShapeRef resolves."""
    pruner = _Pruner(schema.declared_ids(), warn)
    return Schema(
        shapes=[pruner.decl(decl) for decl in schema.shapes],
        prefixes=list(schema.prefixes),
    )


def dangling_references(schema: Schema) -> list[str]:
    """Labels referenced somewhere in ``schema`` but not declared in it."""
    found: list[str] = []
    declared = schema.declared_ids()
    for ref in iter_references(schema):
        if ref not in declared and ref not in found:
            found.append(ref)
    return found


def iter_references(schema: Schema):
    """Yield every ShapeRef label reachable from the declarations."""
    stack: list = [decl.shape_expr for decl in schema.shapes]
    while stack:
        node = stack.pop()
        if isinstance(node, ShapeRef):
            yield node.reference
        elif isinstance(node, (ShapeAnd, ShapeOr)):
            stack.extend(node.shape_exprs)
        elif isinstance(node, ShapeNot):
            stack.append(node.shape_expr)
        elif isinstance(node, Shape):
            if node.expression is not None:
                stack.append(node.expression)
        elif isinstance(node, (EachOf, OneOf)):
            stack.extend(node.expressions)
        elif isinstance(node, TripleConstraint):
            if node.value_expr is not None:
                stack.append(node.value_expr)
