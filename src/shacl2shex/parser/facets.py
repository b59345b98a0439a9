"""Read the SHACL facets of a shape node into a :class:`Facets` bundle."""
from __future__ import annotations

from typing import Optional

from rdflib import BNode, Literal, URIRef

from shacl2shex.errors import UnsupportedConstruct
from shacl2shex.graph import ShapesGraph
from shacl2shex.schema.shacl import NODE_KIND_MAP, SH, Facets, SparqlConstraint, Term


def _int_facet(g: ShapesGraph, node: Term, predicate: URIRef) -> Optional[int]:
    value = g.value(node, predicate)
    if value is None:
        return None
    py = value.toPython() if isinstance(value, Literal) else None
    if isinstance(py, bool) or not isinstance(py, int):
        raise UnsupportedConstruct(
            f"sh:{predicate.split('#')[-1]}",
            f"expected an integer, got {value!r}",
            focus=str(node),
        )
    return py


def _bool_facet(g: ShapesGraph, node: Term, predicate: URIRef) -> bool:
    value = g.value(node, predicate)
    if value is None:
        return False
    if isinstance(value, Literal) and isinstance(value.toPython(), bool):
        return value.toPython()
    return str(value).lower() == "true"


def _str_facet(g: ShapesGraph, node: Term, predicate: URIRef) -> Optional[str]:
    value = g.value(node, predicate)
    return str(value) if value is not None else None


def _literal_facet(g: ShapesGraph, node: Term, predicate: URIRef) -> Optional[Literal]:
    value = g.value(node, predicate)
    if value is None:
        return None
    if not isinstance(value, Literal):
        raise UnsupportedConstruct(
            f"sh:{predicate.split('#')[-1]}",
            f"expected a literal, got {value!r}",
            focus=str(node),
        )
    return value


def _iris(g: ShapesGraph, node: Term, predicate: URIRef) -> list[URIRef]:
    return [o for o in g.objects(node, predicate) if isinstance(o, URIRef)]


def _classes(g: ShapesGraph, node: Term) -> list[URIRef]:
    """sh:class values, including the ``sh:class [ sh:or ( A B ) ]`` form."""
    classes: list[URIRef] = []
    for cls in g.objects(node, SH["class"]):
        if isinstance(cls, URIRef):
            classes.append(cls)
        elif isinstance(cls, BNode):
            or_head = g.value(cls, SH["or"])
            classes.extend(i for i in g.items(or_head) if isinstance(i, URIRef))
    return classes


def _lists(g: ShapesGraph, node: Term, predicate: URIRef) -> list[list[Term]]:
    return [g.items(head) for head in g.objects(node, predicate)]


def _node_kind(g: ShapesGraph, node: Term):
    nk = g.value(node, SH.nodeKind)
    if nk is None:
        return None
    if nk not in NODE_KIND_MAP:
        raise UnsupportedConstruct("sh:nodeKind", f"unknown node kind {nk}", focus=str(node))
    return NODE_KIND_MAP[nk]


def _sparql(g: ShapesGraph, node: Term) -> list[SparqlConstraint]:
    constraints = []
    for constraint in g.objects(node, SH.sparql):
        select = g.value(constraint, SH.select)
        ask = g.value(constraint, SH.ask)
        message = g.value(constraint, SH.message)
        if select is not None:
            constraints.append(SparqlConstraint(str(select), "select",
                                                str(message) if message else None))
        elif ask is not None:
            constraints.append(SparqlConstraint(str(ask), "ask",
                                                str(message) if message else None))
    return constraints


def extract_facets(g: ShapesGraph, node: Term) -> Facets:
    """Collect the SHACL facets declared on ``node``.

    Raises:
        UnsupportedConstruct: a facet has a value of the wrong kind (e.g. a
            non-integer sh:minCount) or a list is malformed.
    """
    in_head = g.value(node, SH["in"])
    lang_head = g.value(node, SH.languageIn)
    datatype = g.value(node, SH.datatype)

    return Facets(
        datatype=datatype if isinstance(datatype, URIRef) else None,
        node_kind=_node_kind(g, node),
        classes=_classes(g, node),
        pattern=_str_facet(g, node, SH.pattern),
        flags=_str_facet(g, node, SH.flags),
        min_count=_int_facet(g, node, SH.minCount),
        max_count=_int_facet(g, node, SH.maxCount),
        min_length=_int_facet(g, node, SH.minLength),
        max_length=_int_facet(g, node, SH.maxLength),
        min_inclusive=_literal_facet(g, node, SH.minInclusive),
        max_inclusive=_literal_facet(g, node, SH.maxInclusive),
        min_exclusive=_literal_facet(g, node, SH.minExclusive),
        max_exclusive=_literal_facet(g, node, SH.maxExclusive),
        in_values=g.items(in_head) if in_head is not None else None,
        has_values=g.objects(node, SH.hasValue),
        language_in=[str(v) for v in g.items(lang_head)] if lang_head is not None else None,
        unique_lang=_bool_facet(g, node, SH.uniqueLang),
        nodes=g.objects(node, SH.node),
        and_lists=_lists(g, node, SH["and"]),
        or_lists=_lists(g, node, SH["or"]),
        xone_lists=_lists(g, node, SH.xone),
        not_shapes=g.objects(node, SH["not"]),
        closed=_bool_facet(g, node, SH.closed),
        ignored_properties=[
            i for head in g.objects(node, SH.ignoredProperties)
            for i in g.items(head) if isinstance(i, URIRef)
        ],
        deactivated=_bool_facet(g, node, SH.deactivated),
        equals=_iris(g, node, SH.equals),
        disjoint=_iris(g, node, SH.disjoint),
        less_than=_iris(g, node, SH.lessThan),
        less_than_or_equals=_iris(g, node, SH.lessThanOrEquals),
        qualified_value_shape=g.value(node, SH.qualifiedValueShape),
        qualified_min_count=_int_facet(g, node, SH.qualifiedMinCount),
        qualified_max_count=_int_facet(g, node, SH.qualifiedMaxCount),
        qualified_value_shapes_disjoint=_bool_facet(g, node, SH.qualifiedValueShapesDisjoint),
        sparql=_sparql(g, node),
    )
