from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence


class DiagnosticKind(str, Enum):
    TEMPLATE_ERROR = "TemplateError"
    DUPLICATE_ENDPOINT_ID = "DuplicateEndpointId"
    CONFLICT_ERROR = "ConflictError"
    CYCLE_ERROR = "CycleError"


class Rule(str, Enum):
    MALFORMED_TEMPLATE = "malformed-template"
    PATH_PARAM_MISMATCH = "path-param-mismatch"
    DUPLICATE_ID = "duplicate-id"
    PURE_PATH = "pure-path"
    EXACT_MATCH = "exact-match"
    SUBSET = "subset"
    PRECEDENCE_CYCLE = "precedence-cycle"


RESOLVED = "resolved-by-precedence"
UNRESOLVED = "unresolved"

_KIND_RANK = {k: i for i, k in enumerate(DiagnosticKind)}


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    rule: Rule
    endpoints: tuple[str, ...]
    message: str
    group: Optional[str] = None
    status: str = UNRESOLVED
    locations: tuple[str, ...] = field(default=())

    def describe(self) -> str:
        where = f"[{self.group}] " if self.group else ""
        return f"{self.kind.value} {where}{self.rule.value}: {self.message}"

    def as_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "group": self.group,
            "rule": self.rule.value,
            "status": self.status,
            "endpoints": list(self.endpoints),
            "locations": list(self.locations),
            "message": self.message,
        }


def _group_sort_key(
    d: Diagnostic,
    group_rank: Mapping[str, int],
    position: Mapping[str, int],
) -> tuple:
    ids = sorted(d.endpoints)
    first = position.get(ids[0], len(position)) if ids else len(position)
    rest = tuple(position.get(i, len(position)) for i in ids[1:])
    return (group_rank.get(d.group or "", len(group_rank)), first, rest, _KIND_RANK[d.kind])


def collect_diagnostics(
    input_diagnostics: Iterable[Diagnostic],
    group_diagnostics: Iterable[Diagnostic],
    group_ids: Sequence[str],
    endpoint_order: Sequence[str],
) -> list[Diagnostic]:
    """
    Merge every diagnostic of one run into canonical order.

    Input problems (duplicate ids, bad templates) keep input order and come
    first. Group problems follow, ordered by group discovery, then by the
    input position of the lexicographically-earlier endpoint id, then by the
    remaining endpoints, then by kind.
    """
    group_rank = {gid: i for i, gid in enumerate(group_ids)}
    position: dict[str, int] = {}
    for i, eid in enumerate(endpoint_order):
        position.setdefault(eid, i)

    ordered = list(input_diagnostics)
    ordered.extend(
        sorted(group_diagnostics, key=lambda d: _group_sort_key(d, group_rank, position))
    )
    return ordered


def render_json(diagnostics: Iterable[Diagnostic]) -> str:
    return json.dumps([d.as_dict() for d in diagnostics], indent=2)
