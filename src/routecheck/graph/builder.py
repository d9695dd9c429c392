from __future__ import annotations

import logging
from typing import Optional, Sequence

import networkx as nx

from routecheck.graph.model import ConflictGroup, EndpointEntry
from routecheck.paths.overlap import templates_overlap

log = logging.getLogger(__name__)


def media_type(content_type: Optional[str]) -> Optional[str]:
    # "Application/JSON; charset=utf-8" -> "application/json"
    if content_type is None:
        return None
    essence = content_type.split(";", 1)[0].strip().lower()
    return essence or None


def shares_route(a: EndpointEntry, b: EndpointEntry) -> bool:
    return (
        a.endpoint.method == b.endpoint.method
        and a.media_type == b.media_type
        and templates_overlap(a.template, b.template)
    )


def build_conflict_groups(entries: Sequence[EndpointEntry]) -> list[ConflictGroup]:
    """
    Partition endpoints into maximal clusters linked by shared route.

    Edges:
      - same method
      - same content type (media type only)
      - overlapping URL templates

    Connected components with two or more members are the groups, in the
    order their first member appears in the input.
    """
    by_index = {e.index: e for e in entries}
    g = nx.Graph()
    g.add_nodes_from(by_index)
    for i, a in enumerate(entries):
        for b in entries[i + 1:]:
            if shares_route(a, b):
                g.add_edge(a.index, b.index)

    components = sorted(
        (sorted(comp) for comp in nx.connected_components(g) if len(comp) > 1),
        key=lambda comp: comp[0],
    )

    groups: list[ConflictGroup] = []
    for comp in components:
        members = [by_index[i] for i in comp]
        first = members[0]
        group = ConflictGroup(
            id=f"group-{len(groups) + 1}",
            method=first.endpoint.method,
            media_type=first.media_type,
            members=tuple(m.id for m in members),
        )
        log.debug("%s: %s %s -> %s", group.id, group.method, first.template.render(), group.members)
        groups.append(group)

    return groups
