from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from routecheck.analysis.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    Rule,
    collect_diagnostics,
)
from routecheck.analysis.resolver import GroupResolution, resolve_group
from routecheck.domain.models import Contract, EndpointDefinition
from routecheck.graph.builder import build_conflict_groups, media_type
from routecheck.graph.model import EndpointEntry
from routecheck.paths.template import TemplateError, normalize_template

log = logging.getLogger(__name__)


class ContractLoadError(Exception):
    pass


@dataclass(frozen=True)
class CheckResult:
    orders: dict[str, tuple[str, ...]]
    resolutions: list[GroupResolution]
    diagnostics: list[Diagnostic]

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def _path_param_problem(endpoint: EndpointDefinition, names: list[str]) -> str | None:
    declared = endpoint.path_param_names()
    missing = [n for n in names if n not in declared]
    extra = [n for n in declared if n not in names]
    if missing:
        return f"capture {missing[0]!r} has no matching path parameter"
    if extra:
        return f"path parameter {extra[0]!r} does not appear in the template"
    return None


def _validate_entries(
    endpoints: Sequence[EndpointDefinition],
) -> tuple[list[EndpointEntry], list[Diagnostic]]:
    entries: list[EndpointEntry] = []
    problems: list[Diagnostic] = []
    seen: dict[str, EndpointDefinition] = {}

    for index, ep in enumerate(endpoints):
        first = seen.get(ep.id)
        if first is not None:
            problems.append(
                Diagnostic(
                    kind=DiagnosticKind.DUPLICATE_ENDPOINT_ID,
                    rule=Rule.DUPLICATE_ID,
                    endpoints=(ep.id,),
                    message=f"endpoint id {ep.id!r} is declared more than once",
                    locations=(first.location, ep.location),
                )
            )
            continue
        seen[ep.id] = ep

        try:
            template = normalize_template(ep.path)
        except TemplateError as exc:
            problems.append(
                Diagnostic(
                    kind=DiagnosticKind.TEMPLATE_ERROR,
                    rule=Rule.MALFORMED_TEMPLATE,
                    endpoints=(ep.id,),
                    message=f"{ep.id}: {exc}",
                    locations=(ep.location,),
                )
            )
            continue

        mismatch = _path_param_problem(ep, template.dynamic_names())
        if mismatch:
            problems.append(
                Diagnostic(
                    kind=DiagnosticKind.TEMPLATE_ERROR,
                    rule=Rule.PATH_PARAM_MISMATCH,
                    endpoints=(ep.id,),
                    message=f"{ep.id}: {template.render()}: {mismatch}",
                    locations=(ep.location,),
                )
            )
            continue

        entries.append(
            EndpointEntry(
                index=index,
                endpoint=ep,
                template=template,
                media_type=media_type(ep.content_type),
            )
        )

    return entries, problems


def check_endpoints(endpoints: Sequence[EndpointDefinition]) -> CheckResult:
    """
    Check one contract's endpoints for routing ambiguity.

    Every problem is collected; nothing is raised for bad input. The result
    carries a precedence order for each clean group and the diagnostics in
    canonical order.
    """
    entries, input_problems = _validate_entries(endpoints)
    by_id = {e.id: e for e in entries}

    groups = build_conflict_groups(entries)
    resolutions = [resolve_group(g, by_id) for g in groups]

    diagnostics = collect_diagnostics(
        input_problems,
        [d for r in resolutions for d in r.diagnostics],
        group_ids=[g.id for g in groups],
        endpoint_order=[ep.id for ep in endpoints],
    )
    orders = {r.group.id: r.order for r in resolutions if r.order is not None}

    log.debug(
        "checked %d endpoints: %d groups, %d diagnostics",
        len(endpoints),
        len(groups),
        len(diagnostics),
    )
    return CheckResult(orders=orders, resolutions=resolutions, diagnostics=diagnostics)


def load_contract(path: Path) -> Contract:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ContractLoadError(f"cannot read contract {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ContractLoadError(f"{path}: invalid JSON: {exc}") from exc

    try:
        return Contract.model_validate(data)
    except ValidationError as exc:
        raise ContractLoadError(f"{path}: invalid contract:\n{exc}") from exc


def run_check(contract_path: Path) -> tuple[Contract, CheckResult]:
    contract = load_contract(contract_path)
    log.info("contract %s: %d endpoints", contract.name, len(contract.endpoints))
    return contract, check_endpoints(contract.resolved_endpoints())
