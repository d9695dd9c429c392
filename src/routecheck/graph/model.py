from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import networkx as nx

from routecheck.domain.models import EndpointDefinition
from routecheck.paths.template import UrlTemplate


@dataclass(frozen=True)
class EndpointEntry:
    """A validated endpoint together with its parsed template and input position."""

    index: int
    endpoint: EndpointDefinition
    template: UrlTemplate
    media_type: Optional[str]

    @property
    def id(self) -> str:
        return self.endpoint.id


@dataclass(frozen=True)
class ConflictGroup:
    id: str
    method: str
    media_type: Optional[str]
    members: tuple[str, ...]  # endpoint ids, input order


@dataclass(frozen=True)
class PrecedenceEdge:
    higher: str
    lower: str


@dataclass
class PrecedenceGraph:
    nodes: list[str]
    edges: list[PrecedenceEdge]

    def __init__(self, nodes: list[str]) -> None:
        self.nodes = list(nodes)
        self.edges = []
        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(self.nodes)

    def add_edge(self, edge: PrecedenceEdge) -> None:
        # de-dupe, keep declaration order for reporting
        if edge not in self.edges:
            self.edges.append(edge)
            self.graph.add_edge(edge.higher, edge.lower)

    def cycle_edges(self) -> list[PrecedenceEdge]:
        """Edges lying on at least one cycle (both ends in one non-trivial component)."""
        comp_of: dict[str, int] = {}
        for i, comp in enumerate(nx.strongly_connected_components(self.graph)):
            if len(comp) > 1:
                for n in comp:
                    comp_of[n] = i
        return [
            e
            for e in self.edges
            if e.higher in comp_of and comp_of.get(e.lower) == comp_of[e.higher]
        ]

    def topological_order(self) -> Optional[list[str]]:
        """Topological order, ties broken by node order. None if the graph has a cycle."""
        position = {n: i for i, n in enumerate(self.nodes)}
        try:
            return list(nx.lexicographical_topological_sort(self.graph, key=position.__getitem__))
        except nx.NetworkXUnfeasible:
            return None
