from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from routecheck.analysis.diagnostics import DiagnosticKind, render_json
from routecheck.orchestrator.pipeline import CheckResult, ContractLoadError, run_check


app = typer.Typer(no_args_is_help=True, add_completion=False)

graph_app = typer.Typer(no_args_is_help=True)
app.add_typer(graph_app, name="graph")

console = Console()


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(contract: str) -> CheckResult:
    path = Path(contract).expanduser().resolve()
    if not path.is_file():
        raise typer.BadParameter(f"Contract file does not exist: {path}")
    try:
        _, result = run_check(path)
    except ContractLoadError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return result


@app.command()
def check(
    contract: str = typer.Argument(..., help="Path to the JSON contract"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    result = _load(contract)

    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    if fmt == "json":
        # plain print keeps the output byte-stable (no rich wrapping)
        print(render_json(result.diagnostics))
    elif result.ok:
        console.print(
            f"[bold green]OK[/bold green] no routing ambiguity "
            f"({len(result.resolutions)} groups checked)"
        )
    else:
        table = Table(show_header=True, header_style="bold")
        table.add_column("KIND", no_wrap=True)
        table.add_column("GROUP", no_wrap=True)
        table.add_column("RULE", no_wrap=True)
        table.add_column("ENDPOINTS")
        table.add_column("MESSAGE")
        table.add_column("AT")

        for d in result.diagnostics:
            table.add_row(
                d.kind.value,
                d.group or "-",
                d.rule.value,
                ", ".join(d.endpoints),
                d.message,
                ", ".join(loc for loc in d.locations if loc),
            )
        console.print(table)
        console.print(f"[bold red]{len(result.diagnostics)} problem(s)[/bold red]")

    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def order(
    contract: str = typer.Argument(..., help="Path to the JSON contract"),
) -> None:
    """Print the route registration order of every conflict group."""
    result = _load(contract)

    for r in result.resolutions:
        g = r.group
        header = f"[bold]{g.id}[/bold] {g.method}"
        if g.media_type:
            header += f" ({g.media_type})"
        console.print(header)
        if r.order is None:
            kinds = {d.kind for d in r.diagnostics}
            reason = "precedence cycle" if DiagnosticKind.CYCLE_ERROR in kinds else "unresolved ambiguity"
            console.print(f"  [red]no order: {reason}[/red]", highlight=False)
            for d in r.diagnostics:
                console.print(f"    {d.describe()}", markup=False, highlight=False)
            continue
        for i, eid in enumerate(r.order, start=1):
            console.print(f"  {i:>3}. {eid}")

    if not result.ok:
        console.print(f"[bold red]{len(result.diagnostics)} problem(s)[/bold red], run check for details")
        raise typer.Exit(code=1)


@graph_app.command("export")
def graph_export(
    contract: str = typer.Argument(..., help="Path to the JSON contract"),
    format: str = typer.Option("json", help="Export format: json|dot"),
    out: Optional[str] = typer.Option(None, help="Output path (default: print to stdout)"),
) -> None:
    result = _load(contract)

    fmt = format.lower().strip()
    if fmt not in ("json", "dot"):
        raise typer.BadParameter("format must be one of: json, dot")

    if fmt == "json":
        payload = {
            "groups": [
                {
                    "id": r.group.id,
                    "method": r.group.method,
                    "media_type": r.group.media_type,
                    "members": list(r.group.members),
                    "edges": [{"higher": e.higher, "lower": e.lower} for e in r.edges],
                    "order": list(r.order) if r.order is not None else None,
                }
                for r in result.resolutions
            ],
        }
        text = json.dumps(payload, indent=2)
    else:
        lines = []
        lines.append("digraph routecheck {")
        lines.append('  rankdir="TB";')
        lines.append('  node [shape="box"];')

        for r in result.resolutions:
            cluster = r.group.id.replace("-", "_")
            lines.append(f'  subgraph "cluster_{cluster}" {{')
            lines.append(f'    label="{r.group.id} {r.group.method}";')
            for eid in r.group.members:
                label = eid.replace('"', '\\"')
                lines.append(f'    "{label}";')
            lines.append("  }")

        for r in result.resolutions:
            for e in r.edges:
                hi = e.higher.replace('"', '\\"')
                lo = e.lower.replace('"', '\\"')
                lines.append(f'  "{hi}" -> "{lo}";')

        lines.append("}")
        text = "\n".join(lines)

    if out:
        out_path = Path(out).expanduser()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        console.print(f"[bold green]Wrote[/bold green] {fmt} graph to: {out_path}")
    else:
        print(text)


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
