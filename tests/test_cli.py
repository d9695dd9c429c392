import json
from pathlib import Path

from typer.testing import CliRunner

from routecheck.cli import app


runner = CliRunner()


def write(p: Path, payload) -> Path:
    p.write_text(json.dumps(payload), encoding="utf-8")
    return p


CLEAN = {
    "endpoints": [
        {"id": "A", "path": "/items", "method": "GET", "precedence": ["B"]},
        {
            "id": "B",
            "path": "/items",
            "method": "GET",
            "params": [{"name": "active", "kind": "query"}],
        },
    ]
}

CONFLICTING = {
    "endpoints": [
        {"id": "A", "path": "/items", "method": "GET"},
        {"id": "B", "path": "/items", "method": "GET"},
    ]
}


def test_cli_ping():
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 0
    assert "pong" in result.stdout


def test_cli_check_clean_contract(tmp_path: Path):
    f = write(tmp_path / "c.json", CLEAN)
    result = runner.invoke(app, ["check", str(f)])
    assert result.exit_code == 0
    assert "OK" in result.stdout


def test_cli_check_json_output_and_exit_code(tmp_path: Path):
    f = write(tmp_path / "c.json", CONFLICTING)
    result = runner.invoke(app, ["check", str(f), "--format", "json"])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload[0]["kind"] == "ConflictError"
    assert payload[0]["rule"] == "pure-path"
    assert payload[0]["endpoints"] == ["A", "B"]


def test_cli_order(tmp_path: Path):
    f = write(tmp_path / "c.json", CLEAN)
    result = runner.invoke(app, ["order", str(f)])
    assert result.exit_code == 0
    assert result.stdout.index("A") < result.stdout.index("B")


def test_cli_graph_export_json(tmp_path: Path):
    f = write(tmp_path / "c.json", CLEAN)
    out = tmp_path / "graph.json"
    result = runner.invoke(app, ["graph", "export", str(f), "--out", str(out)])
    assert result.exit_code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    (group,) = payload["groups"]
    assert group["edges"] == [{"higher": "A", "lower": "B"}]
    assert group["order"] == ["A", "B"]


def test_cli_graph_export_dot(tmp_path: Path):
    f = write(tmp_path / "c.json", CLEAN)
    result = runner.invoke(app, ["graph", "export", str(f), "--format", "dot"])
    assert result.exit_code == 0
    assert '"A" -> "B";' in result.stdout


def test_cli_missing_contract(tmp_path: Path):
    result = runner.invoke(app, ["check", str(tmp_path / "nope.json")])
    assert result.exit_code != 0


CYCLIC = {
    "endpoints": [
        {"id": "A", "path": "/items", "method": "GET", "precedence": ["B"]},
        {"id": "B", "path": "/items", "method": "GET", "precedence": ["A"]},
    ]
}


def test_cli_order_names_cycle_as_reason(tmp_path: Path):
    f = write(tmp_path / "c.json", CYCLIC)
    result = runner.invoke(app, ["order", str(f)])
    assert result.exit_code == 1
    assert "no order: precedence cycle" in result.stdout
    assert "unresolved ambiguity" not in result.stdout
    assert "CycleError [group-1] precedence-cycle" in result.stdout


def test_cli_order_names_ambiguity_as_reason(tmp_path: Path):
    f = write(tmp_path / "c.json", CONFLICTING)
    result = runner.invoke(app, ["order", str(f)])
    assert result.exit_code == 1
    assert "no order: unresolved ambiguity" in result.stdout
