from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from routecheck.analysis.diagnostics import (
    RESOLVED,
    UNRESOLVED,
    Diagnostic,
    DiagnosticKind,
    Rule,
)
from routecheck.analysis.params import ParamSets, classify_params
from routecheck.graph.model import ConflictGroup, EndpointEntry, PrecedenceEdge, PrecedenceGraph
from routecheck.paths.overlap import templates_overlap

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ambiguity:
    first: str
    second: str
    rule: Rule
    status: str
    edge: Optional[PrecedenceEdge] = None


@dataclass(frozen=True)
class GroupResolution:
    group: ConflictGroup
    ambiguities: tuple[Ambiguity, ...]
    edges: tuple[PrecedenceEdge, ...]
    diagnostics: tuple[Diagnostic, ...]
    order: Optional[tuple[str, ...]]  # None when the group has problems

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def ambiguity_rule(a: ParamSets, b: ParamSets) -> Optional[Rule]:
    """Which rule (if any) makes two same-route endpoints indistinguishable."""
    if not a.required and not b.required:
        return Rule.PURE_PATH
    if a.required == b.required:
        return Rule.EXACT_MATCH
    if a.required <= b.all or b.required <= a.all:
        return Rule.SUBSET
    return None


_RULE_TEXT = {
    Rule.PURE_PATH: "neither endpoint requires non-path parameters",
    Rule.EXACT_MATCH: "both endpoints require the same parameters",
    Rule.SUBSET: "the required parameters of one are accepted by the other",
}


def _locations(*entries: EndpointEntry) -> tuple[str, ...]:
    return tuple(e.endpoint.location for e in entries)


def resolve_group(group: ConflictGroup, entries: Mapping[str, EndpointEntry]) -> GroupResolution:
    """
    Detect pairwise ambiguity inside one group and resolve it by declared precedence.

    Precedence hints between members become edges of the group's precedence
    graph. An ambiguous pair with exactly one hinted direction is resolved;
    one with no hint is a ConflictError. Every edge on a cycle of the graph
    is a CycleError. Only a clean group gets a precedence order.
    """
    members = [entries[eid] for eid in group.members]
    member_ids = set(group.members)
    sets = {m.id: classify_params(m.endpoint) for m in members}

    graph = PrecedenceGraph(list(group.members))
    for m in members:
        for lower in m.endpoint.precedence:
            if lower in member_ids:
                graph.add_edge(PrecedenceEdge(higher=m.id, lower=lower))
            else:
                log.debug("%s: hint %s -> %s is outside the group, ignored", group.id, m.id, lower)
    hinted = set(graph.edges)

    ambiguities: list[Ambiguity] = []
    diagnostics: list[Diagnostic] = []

    for i, a in enumerate(members):
        for b in members[i + 1:]:
            # linked only through a third member; no path matches both
            if not templates_overlap(a.template, b.template):
                continue
            rule = ambiguity_rule(sets[a.id], sets[b.id])
            if rule is None:
                continue

            forward = PrecedenceEdge(higher=a.id, lower=b.id)
            backward = PrecedenceEdge(higher=b.id, lower=a.id)
            has_fwd, has_bwd = forward in hinted, backward in hinted

            if has_fwd != has_bwd:
                edge = forward if has_fwd else backward
                ambiguities.append(Ambiguity(a.id, b.id, rule, RESOLVED, edge))
                log.debug("%s: %s resolved by %s over %s", group.id, rule.value, edge.higher, edge.lower)
                continue

            ambiguities.append(Ambiguity(a.id, b.id, rule, UNRESOLVED))
            if has_fwd and has_bwd:
                # contradictory hints; reported below as a two-node cycle
                continue
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.CONFLICT_ERROR,
                    rule=rule,
                    endpoints=(a.id, b.id),
                    group=group.id,
                    message=(
                        f"{a.id} ({a.template.render()}) and {b.id} ({b.template.render()}) "
                        f"both match one {group.method} path: {_RULE_TEXT[rule]} "
                        "and no relative precedence was declared"
                    ),
                    locations=_locations(a, b),
                )
            )

    for edge in graph.cycle_edges():
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.CYCLE_ERROR,
                rule=Rule.PRECEDENCE_CYCLE,
                endpoints=(edge.higher, edge.lower),
                group=group.id,
                message=f"precedence {edge.higher} over {edge.lower} lies on a cycle",
                locations=_locations(entries[edge.higher], entries[edge.lower]),
            )
        )

    order: Optional[tuple[str, ...]] = None
    if not diagnostics:
        topo = graph.topological_order()
        if topo is not None:
            order = tuple(topo)

    return GroupResolution(
        group=group,
        ambiguities=tuple(ambiguities),
        edges=tuple(graph.edges),
        diagnostics=tuple(diagnostics),
        order=order,
    )
