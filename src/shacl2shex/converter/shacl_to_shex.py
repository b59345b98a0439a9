"""Convert a SHACL shapes graph to a ShEx schema.

Every SHACL shape becomes one ShapeDecl. Named shapes are never translated
recursively: a reference to one yields a ShapeRef and queues the shape for
declaration, which keeps cyclic shape graphs finite. Inline (blank node)
shapes are translated in place, except for ``sh:node`` targets, which are
declared under a generated label.

Mapping rules based on the Validating RDF Book Ch. 13 and weso/shaclex.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from loguru import logger
from rdflib import BNode, Graph, Literal, URIRef

from shacl2shex.config import ConversionOptions
from shacl2shex.converter.context import ConversionContext
from shacl2shex.converter.logical import conjoin, disjoin, exactly_one, negate
from shacl2shex.converter.paths import PathTranslation, describe_path, translate_path
from shacl2shex.converter.pruner import prune_dangling_references
from shacl2shex.converter.target_index import build_target_class_index
from shacl2shex.converter.values import class_expr, comment, node_constraint
from shacl2shex.errors import ConversionFailure, InvalidInput, UnsupportedConstruct
from shacl2shex.graph import ShapesGraph
from shacl2shex.parser.facets import extract_facets
from shacl2shex.schema.common import UNBOUNDED, Prefix
from shacl2shex.schema.shacl import SH, Facets, Term
from shacl2shex.schema.shex import (
    Annotation,
    EachOf,
    NodeConstraint,
    ObjectLiteral,
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


@dataclass
class ConversionResult:
    schema: Schema
    warnings: list[str] = field(default_factory=list)
    # Shape term -> label it is declared under.
    labels: dict[Term, str] = field(default_factory=dict)


def _group(triple_exprs: list[TripleExpr]) -> Optional[TripleExpr]:
    if not triple_exprs:
        return None
    if len(triple_exprs) == 1:
        return triple_exprs[0]
    return EachOf(expressions=triple_exprs)


class ShapeAssembler:
    """Builds the shape expression of each SHACL shape."""

    def __init__(self, g: ShapesGraph, ctx: ConversionContext):
        self.g = g
        self.ctx = ctx

    @property
    def options(self) -> ConversionOptions:
        return self.ctx.options

    def _comments(self, *texts: str) -> list[Annotation]:
        if not self.options.annotate:
            return []
        return [comment(t) for t in texts]

    def _recover(self, error: UnsupportedConstruct, message: str) -> None:
        if self.options.strict:
            raise error
        self.ctx.warn(f"{message}: {error.describe()}")

    # -- declarations ------------------------------------------------------

    def declare(self, term: Term, label: str) -> ShapeExpr:
        """Shape expression for the declaration of ``term``."""
        try:
            facets = extract_facets(self.g, term)
            if facets.deactivated:
                self.ctx.warn(f"{label}: deactivated shape declared without constraints")
                return Shape(annotations=self._comments("sh:deactivated true"))
            expr = self.shape_expr(term, facets, label)
        except UnsupportedConstruct as e:
            self._recover(e, f"{label}: shape declared without constraints")
            return Shape(annotations=self._comments(f"Not translated: {e.describe()}"))
        if expr is None:
            logger.debug(f"{label}: no constraints, declared as an empty shape")
            return Shape()
        return expr

    def shape_expr(self, term: Term, facets: Facets, owner: str) -> Optional[ShapeExpr]:
        """Combine property, node-level and logical constraints of a shape."""
        if self.g.value(term, SH.path) is not None:
            # A property shape used where a shape is expected.
            return Shape(expression=_group(self.triple_constraints(term, facets, owner)))

        properties: list[TripleExpr] = []
        for prop in self.g.objects(term, SH.property):
            properties.extend(self.property_constraints(prop, owner))

        node_expr = self.value_expr(term, facets, owner, include_logical=False)

        shape = None
        if properties or facets.closed or facets.ignored_properties or facets.sparql:
            shape = Shape(
                expression=_group(properties),
                closed=facets.closed,
                extra=[str(p) for p in facets.ignored_properties],
                annotations=self._sparql_annotations(facets, owner),
            )

        expr = conjoin([node_expr, shape])
        logical = self.logical_expr(facets, owner)
        if logical is None:
            return expr
        if expr is None:
            return logical
        return ShapeAnd(shape_exprs=[expr, logical])

    # -- property shapes ---------------------------------------------------

    def property_constraints(self, prop: Term, owner: str) -> list[TripleExpr]:
        """TripleConstraints for one ``sh:property``; empty when dropped."""
        if isinstance(prop, Literal):
            self.ctx.warn(f"{owner}: sh:property value {prop!r} is not a shape; skipped")
            return []
        try:
            facets = extract_facets(self.g, prop)
            if facets.deactivated:
                logger.debug(f"{owner}: skipping deactivated property shape {prop}")
                return []
            return self.triple_constraints(prop, facets, owner)
        except UnsupportedConstruct as e:
            self._recover(e, f"{owner}: property shape {self._describe(prop)} dropped")
            return []

    def _describe(self, prop: Term) -> str:
        path = self.g.value(prop, SH.path)
        if path is None:
            return str(prop)
        return describe_path(self.g, path)

    def triple_constraints(self, prop: Term, facets: Facets, owner: str) -> list[TripleExpr]:
        path_node = self.g.value(prop, SH.path)
        if path_node is None:
            raise UnsupportedConstruct("property shape", "missing sh:path", focus=str(prop))
        path = translate_path(self.g, path_node)
        if isinstance(path, UnsupportedConstruct):
            self._recover(path, f"{owner}: property shape {self._describe(prop)} dropped")
            return []

        min_count = facets.min_count if facets.min_count is not None else 0
        max_count = facets.max_count if facets.max_count is not None else UNBOUNDED
        if max_count != UNBOUNDED and min_count > max_count:
            raise UnsupportedConstruct(
                "cardinality",
                f"sh:minCount {min_count} exceeds sh:maxCount {max_count}",
                focus=str(prop),
            )

        value_expr = self.value_expr(prop, facets, owner)
        if value_expr is None and facets.has_value_constraints:
            raise UnsupportedConstruct(
                "value constraint", "no value constraint could be translated", focus=str(prop)
            )

        description = describe_path(self.g, path_node)
        annotations: list[Annotation] = []
        for note in path.notes:
            self.ctx.warn(f"{owner}: {note}")
            annotations.extend(self._comments(note))
        if path.one_or_more:
            self.ctx.warn(f"{owner}: one-or-more path {description} unrolled one level")
            annotations.extend(self._comments(f"Approximation of sh:oneOrMorePath {description}"))
            if value_expr is not None:
                value_expr = self._one_or_more(path, value_expr)

        tc = TripleConstraint(
            predicate=path.predicate,
            value_expr=value_expr,
            min=min_count,
            max=max_count,
            inverse=path.inverse,
            annotations=annotations,
        )
        tc.annotations.extend(self._degraded_annotations(facets, owner, description))

        if facets.qualified_value_shape is None:
            return [tc]
        qualified = self.qualified_constraint(facets, path, owner, description)
        if qualified is None:
            return [tc]
        if value_expr is None and facets.min_count is None and facets.max_count is None:
            qualified.annotations = tc.annotations + qualified.annotations
            return [qualified]
        return [tc, qualified]

    def _one_or_more(self, path: PathTranslation, value_expr: ShapeExpr) -> ShapeExpr:
        """``p+`` as one more hop of ``p`` or the original value expression."""
        hop = TripleConstraint(
            predicate=path.predicate,
            value_expr=value_expr,
            min=1,
            max=UNBOUNDED,
            inverse=path.inverse,
        )
        return ShapeOr(shape_exprs=[Shape(expression=hop), value_expr])

    def _degraded_annotations(self, facets: Facets, owner: str, description: str) -> list[Annotation]:
        annotations: list[Annotation] = []
        if facets.unique_lang:
            self.ctx.warn(f"{owner}: sh:uniqueLang on {description} kept as an annotation only")
            annotations.extend(self._comments("sh:uniqueLang true"))
        for name, others in facets.property_pairs:
            targets = " ".join(f"<{o}>" for o in others)
            self.ctx.warn(f"{owner}: sh:{name} on {description} kept as an annotation only")
            annotations.extend(self._comments(f"sh:{name} {targets}"))
        annotations.extend(self._sparql_annotations(facets, owner))
        return annotations

    def _sparql_annotations(self, facets: Facets, owner: str) -> list[Annotation]:
        annotations = []
        for constraint in facets.sparql:
            self.ctx.warn(f"{owner}: SPARQL constraint preserved as an annotation, not executed")
            if self.options.annotate:
                predicate = SH.select if constraint.kind == "select" else SH.ask
                annotations.append(Annotation(predicate=str(predicate),
                                              object=ObjectLiteral(value=constraint.query)))
                if constraint.message:
                    annotations.append(Annotation(predicate=str(SH.message),
                                                  object=ObjectLiteral(value=constraint.message)))
        return annotations

    def qualified_constraint(
        self, facets: Facets, path: PathTranslation, owner: str, description: str
    ) -> Optional[TripleConstraint]:
        """Approximate sh:qualifiedValueShape as a separate TripleConstraint."""
        try:
            value_expr = self.resolve(facets.qualified_value_shape, owner)
            if value_expr is None:
                raise UnsupportedConstruct(
                    "sh:qualifiedValueShape", "the qualified shape could not be translated",
                    focus=description,
                )
            qmin = facets.qualified_min_count if facets.qualified_min_count is not None else 0
            qmax = facets.qualified_max_count if facets.qualified_max_count is not None else UNBOUNDED
            if qmax != UNBOUNDED and qmin > qmax:
                raise UnsupportedConstruct(
                    "sh:qualifiedValueShape",
                    f"sh:qualifiedMinCount {qmin} exceeds sh:qualifiedMaxCount {qmax}",
                    focus=description,
                )
        except UnsupportedConstruct as e:
            self._recover(e, f"{owner}: qualified value shape on {description} dropped")
            return None

        bounds = []
        if facets.qualified_min_count is not None:
            bounds.append(f"sh:qualifiedMinCount {facets.qualified_min_count}")
        if facets.qualified_max_count is not None:
            bounds.append(f"sh:qualifiedMaxCount {facets.qualified_max_count}")
        notes = ["Approximation of sh:qualifiedValueShape" + (" with " + ", ".join(bounds) if bounds else "")]
        if facets.qualified_value_shapes_disjoint:
            notes.append("sh:qualifiedValueShapesDisjoint true")
        self.ctx.warn(f"{owner}: qualified value shape on {description} approximated")
        return TripleConstraint(
            predicate=path.predicate,
            value_expr=value_expr,
            min=qmin,
            max=qmax,
            inverse=path.inverse,
            annotations=self._comments(*notes),
        )

    # -- value expressions -------------------------------------------------

    def value_expr(
        self, term: Term, facets: Facets, owner: str, include_logical: bool = True
    ) -> Optional[ShapeExpr]:
        """Shape expression for the value (or focus) nodes of ``term``."""
        parts: list[Optional[ShapeExpr]] = []
        if include_logical:
            parts.append(self.logical_expr(facets, owner))
        if facets.node_kind is not None and facets.node_kind.is_approximated:
            self.ctx.warn(f"{owner}: sh:nodeKind sh:{facets.node_kind.value} approximated "
                          f"as {facets.node_kind.shex}")
        if facets.classes:
            # A shape checking its own target class must not reference itself.
            own = self.ctx.memo[term].reference if term in self.ctx.memo else None
            parts.append(class_expr(facets.classes, facets.node_kind, self.ctx.target_classes, own))
        for node in facets.nodes:
            parts.append(self.node_reference(node, owner))
        parts.append(node_constraint(facets, self.ctx, owner, include_node_kind=not facets.classes))
        return conjoin(parts)

    def node_reference(self, node: Term, owner: str) -> Optional[ShapeRef]:
        if isinstance(node, URIRef):
            return self.reference(node)
        if isinstance(node, BNode):
            return self.ctx.reference(node)
        self.ctx.warn(f"{owner}: sh:node value {node!r} is not a shape; ignored")
        return None

    def reference(self, iri: URIRef) -> ShapeRef:
        """Reference a named shape; shapes not yet declared are queued."""
        if iri in self.ctx.memo or self.g.is_shape(iri):
            return self.ctx.reference(iri)
        # Left dangling on purpose; the pruner neutralizes it.
        return ShapeRef(str(iri))

    def resolve(self, term: Term, owner: str) -> Optional[ShapeExpr]:
        """Shape expression for a shape term found in a logical operator."""
        if isinstance(term, URIRef):
            return self.reference(term)
        if not isinstance(term, BNode):
            return None
        if term in self.ctx.memo:
            return self.ctx.memo[term]
        if term in self.ctx.inline_cache:
            return self.ctx.inline_cache[term]
        if term in self.ctx.in_progress:
            # Inline shape reached through itself: give it a declaration.
            return self.ctx.reference(term)

        self.ctx.in_progress.add(term)
        try:
            facets = extract_facets(self.g, term)
            expr = Shape() if facets.deactivated else self.shape_expr(term, facets, owner)
        finally:
            self.ctx.in_progress.discard(term)
        self.ctx.inline_cache[term] = expr
        return expr

    def _resolve_member(self, member: Term, owner: str, operator: str) -> Optional[ShapeExpr]:
        try:
            return self.resolve(member, owner)
        except UnsupportedConstruct as e:
            self._recover(e, f"{owner}: {operator} member {member!r} dropped")
            return None

    def _resolve_all(self, members: list[Term], owner: str, operator: str) -> list[ShapeExpr]:
        exprs = []
        for member in members:
            expr = self._resolve_member(member, owner, operator)
            if expr is None:
                self.ctx.warn(f"{owner}: {operator} member {member!r} could not be translated; skipped")
                continue
            exprs.append(expr)
        if not exprs:
            self.ctx.warn(f"{owner}: {operator} has no translatable member; ignored")
        return exprs

    def logical_expr(self, facets: Facets, owner: str) -> Optional[ShapeExpr]:
        """sh:not, sh:or, sh:and and sh:xone, in that order, conjoined."""
        parts: list[Optional[ShapeExpr]] = []
        for child in facets.not_shapes:
            expr = self._resolve_member(child, owner, "sh:not")
            if expr is None:
                self.ctx.warn(f"{owner}: sh:not operand {child!r} could not be translated; ignored")
                continue
            parts.append(negate(expr))
        for members in facets.or_lists:
            parts.append(disjoin(self._resolve_all(members, owner, "sh:or")))
        for members in facets.and_lists:
            parts.append(conjoin(self._resolve_all(members, owner, "sh:and")))
        for members in facets.xone_lists:
            branches = self._resolve_all(members, owner, "sh:xone")
            if self.options.exact_xone:
                parts.append(exactly_one(branches))
            else:
                if len(branches) > 1:
                    self.ctx.warn(f"{owner}: sh:xone approximated by sh:or; exclusivity not checked")
                parts.append(disjoin(branches))
        return conjoin(parts)


def _collect_used_iris(schema: Schema) -> set[str]:
    """Collect all IRIs used in the schema for prefix filtering."""
    iris: set[str] = set()

    def visit(node) -> None:
        if isinstance(node, ShapeRef):
            iris.add(node.reference)
        elif isinstance(node, NodeConstraint):
            if node.datatype:
                iris.add(node.datatype)
            for v in node.values or []:
                if isinstance(v, str):
                    iris.add(v)
                elif isinstance(v, ObjectLiteral) and v.type:
                    iris.add(v.type)
        elif isinstance(node, Shape):
            iris.update(node.extra)
            iris.update(a.predicate for a in node.annotations)
            if node.expression is not None:
                visit(node.expression)
        elif isinstance(node, (ShapeAnd, ShapeOr)):
            for e in node.shape_exprs:
                visit(e)
        elif isinstance(node, ShapeNot):
            visit(node.shape_expr)
        elif isinstance(node, TripleConstraint):
            iris.add(node.predicate)
            iris.update(a.predicate for a in node.annotations)
            if node.value_expr is not None:
                visit(node.value_expr)
        elif isinstance(node, (EachOf, OneOf)):
            for e in node.expressions:
                visit(e)

    for decl in schema.shapes:
        iris.add(decl.id)
        visit(decl.shape_expr)
    return iris


def _used_prefixes(g: ShapesGraph, schema: Schema) -> list[Prefix]:
    used_iris = _collect_used_iris(schema)
    return [
        pfx for pfx in g.prefixes
        if pfx.name and any(iri.startswith(pfx.iri) for iri in used_iris)
    ]


def convert_shacl_to_shex(
    shapes: Union[ShapesGraph, Graph],
    options: Optional[ConversionOptions] = None,
) -> ConversionResult:
    """Convert a SHACL shapes graph to a ShEx schema.

    Args:
        shapes: The shapes graph (a ShapesGraph or a plain rdflib Graph).
        options: Conversion options; defaults to ``ConversionOptions()``.

    Returns:
        ConversionResult holding the schema and the warnings collected for
        constructs that were approximated or dropped.

    Raises:
        InvalidInput: ``shapes`` is not a graph.
        UnsupportedConstruct: only in strict mode.
    """
    if isinstance(shapes, Graph):
        shapes = ShapesGraph(shapes)
    elif not isinstance(shapes, ShapesGraph):
        raise InvalidInput(f"Expected a shapes graph, got {type(shapes).__name__}")

    ctx = ConversionContext(options=options or ConversionOptions())
    top_level = shapes.shape_terms()
    if not top_level:
        ctx.warn("No shapes found in the shapes graph")
    for term in top_level:
        ctx.reference(term)
    ctx.target_classes = build_target_class_index(
        shapes, top_level, lambda t: ctx.memo[t].reference
    )

    assembler = ShapeAssembler(shapes, ctx)
    while ctx.pending:
        term = ctx.pending.popleft()
        label = ctx.memo[term].reference
        if label in ctx.declarations:
            raise ConversionFailure(f"Shape label {label} declared twice")
        ctx.declarations[label] = ShapeDecl(id=label, shape_expr=assembler.declare(term, label))

    schema = prune_dangling_references(Schema(shapes=list(ctx.declarations.values())), ctx.warn)
    schema.prefixes = _used_prefixes(shapes, schema)
    logger.debug(f"Converted {len(schema.shapes)} shapes with {len(ctx.warnings)} warnings")
    labels = {term: ref.reference for term, ref in ctx.memo.items()}
    return ConversionResult(schema=schema, warnings=ctx.warnings, labels=labels)
