from __future__ import annotations

from dataclasses import dataclass

from routecheck.domain.models import EndpointDefinition, ParamKind


@dataclass(frozen=True)
class ParamSets:
    required: frozenset[str]
    all: frozenset[str]


def classify_params(endpoint: EndpointDefinition) -> ParamSets:
    """
    Required and full sets of non-path parameter names.

    Path params are left out: the URL shape already accounts for them.
    """
    required: set[str] = set()
    everything: set[str] = set()
    for p in endpoint.params:
        if p.kind == ParamKind.PATH:
            continue
        everything.add(p.name)
        if p.required:
            required.add(p.name)
    return ParamSets(required=frozenset(required), all=frozenset(everything))
