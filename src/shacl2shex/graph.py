"""Read-only query facade over an rdflib graph holding SHACL shapes."""
from __future__ import annotations

from typing import Iterator, Optional

from rdflib import OWL, RDF, RDFS, BNode, Graph, URIRef
from rdflib.collection import Collection

from shacl2shex.errors import InvalidInput, UnsupportedConstruct
from shacl2shex.schema.common import Prefix
from shacl2shex.schema.shacl import SH, TARGET_PREDICATES, Term

SHAPE_TYPES = (SH.NodeShape, SH.PropertyShape)


class ShapesGraph:
    """Thin wrapper around :class:`rdflib.Graph` used by the converter.

    Only the default graph is consulted. Iteration order is the store's,
    which is stable for a given graph instance.
    """

    def __init__(self, graph: Graph):
        if not isinstance(graph, Graph):
            raise InvalidInput(f"Expected an rdflib Graph, got {type(graph).__name__}")
        self.graph = graph

    def __len__(self) -> int:
        return len(self.graph)

    def match(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[URIRef] = None,
        obj: Optional[Term] = None,
    ) -> Iterator[tuple[Term, Term, Term]]:
        return self.graph.triples((subject, predicate, obj))

    def objects(self, subject: Term, predicate: URIRef) -> list[Term]:
        return list(self.graph.objects(subject, predicate))

    def value(self, subject: Term, predicate: URIRef) -> Optional[Term]:
        return self.graph.value(subject, predicate)

    def items(self, head: Optional[Term]) -> list[Term]:
        """Elements of the RDF list starting at ``head``, in order."""
        if head is None or head == RDF.nil:
            return []
        try:
            return list(Collection(self.graph, head))
        except ValueError as e:  # rdflib refuses cyclic rdf:rest chains
            raise UnsupportedConstruct("RDF list", str(e), focus=str(head)) from e

    def is_list(self, term: Term) -> bool:
        return term == RDF.nil or self.value(term, RDF.first) is not None

    def is_shape(self, term: Term) -> bool:
        """True when ``term`` carries any SHACL shape description."""
        if isinstance(term, (URIRef, BNode)):
            for shape_type in SHAPE_TYPES:
                if (term, RDF.type, shape_type) in self.graph:
                    return True
            for _, p, _ in self.graph.triples((term, None, None)):
                if isinstance(p, URIRef) and p.startswith(str(SH)):
                    return True
        return False

    def is_implicit_class_target(self, term: Term) -> bool:
        return isinstance(term, URIRef) and (
            (term, RDF.type, RDFS.Class) in self.graph
            or (term, RDF.type, OWL.Class) in self.graph
        )

    def is_referenced(self, term: Term) -> bool:
        for _ in self.graph.triples((None, None, term)):
            return True
        return False

    def shape_terms(self) -> list[Term]:
        """Top-level shapes in first-seen order.

        These are the subjects typed ``sh:NodeShape``, named property shapes
        and anything carrying a target declaration. Blank node shapes that
        appear as the object of another triple are inline and excluded.
        """
        seen: dict[Term, None] = {}
        for shape_type in SHAPE_TYPES:
            for subject in self.graph.subjects(RDF.type, shape_type):
                if shape_type == SH.PropertyShape and not isinstance(subject, URIRef):
                    continue
                seen.setdefault(subject, None)
        for predicate in TARGET_PREDICATES:
            for subject in self.graph.subjects(predicate, None):
                seen.setdefault(subject, None)
        return [
            term for term in seen
            if isinstance(term, URIRef)
            or (isinstance(term, BNode) and not self.is_referenced(term))
        ]

    @property
    def prefixes(self) -> list[Prefix]:
        """Prefix mappings bound in the graph."""
        return [Prefix(name=str(name), iri=str(uri)) for name, uri in self.graph.namespaces()]
