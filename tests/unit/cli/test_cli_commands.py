"""Unit tests for the strategy CLI command groups.

Commands run in-process through typer's CliRunner against a SQLite store in
a temporary directory, so state persists between invocations.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli import engine as cli_engine
from cli.main import app
from strategy_engine import StrategyEngine
from strategy_engine.config import load_config

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run commands from an initialized temporary project."""
    (tmp_path / ".strategy").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STRATEGY_LOG_LEVEL", "WARNING")
    monkeypatch.setitem(cli_engine.settings, "config_path", None)
    monkeypatch.setitem(cli_engine.settings, "config", None)
    return tmp_path


def invoke(*args: str):
    return runner.invoke(app, list(args))


def created_id(result) -> str:
    """Pull the id from a '✓ ... added: <id>' line."""
    assert result.exit_code == 0, result.output
    return result.output.strip().split()[-1]


def engine_for(workspace: Path) -> StrategyEngine:
    return StrategyEngine.from_config(load_config(project_root=workspace), workspace)


def stat_line(result, label: str) -> str:
    """Value printed after '<label>:' in a summary listing."""
    for line in result.output.splitlines():
        if line.startswith(f"{label}:"):
            return line.split(":", 1)[1].strip()
    raise AssertionError(f"No '{label}' line in:\n{result.output}")


class TestRootCommand:
    """Tests for the root callback."""

    def test_version(self):
        result = invoke("--version")
        assert result.exit_code == 0
        assert "strategy version 0.1.0" in result.output

    def test_help_lists_groups(self):
        result = invoke("--help")
        assert result.exit_code == 0
        for name in ("matrix", "deps", "pdca", "init", "doctor"):
            assert name in result.output

    def test_invalid_config_exits(self, workspace: Path):
        bad = workspace / "bad.yaml"
        bad.write_text("store:\n  backend: postgres\n")
        result = invoke("--config", str(bad), "matrix", "list")
        assert result.exit_code == 1
        assert "configuration" in result.output


class TestMatrixCommands:
    """Tests for the matrix command group."""

    def test_grow_revenue_scenario(self, workspace: Path):
        objective_id = created_id(invoke("matrix", "add-objective", "breakthrough", "Grow revenue 20%"))
        metric_id = created_id(invoke("matrix", "add-metric", "Revenue", "20", "%"))

        observed = []
        for _ in range(4):
            result = invoke("matrix", "toggle", objective_id, metric_id, "--type", "metric")
            assert result.exit_code == 0, result.output
            observed.append(result.output)

        assert "strong" in observed[0]
        assert "medium" in observed[1]
        assert "weak" in observed[2]
        assert "removed" in observed[3]

    def test_strength(self, workspace: Path):
        invoke("matrix", "toggle", "o1", "i1", "--type", "action")
        assert invoke("matrix", "strength", "o1", "i1", "-t", "action").output.strip() == "strong"
        assert invoke("matrix", "strength", "o1", "i1").output.strip() == "none"

    def test_empty_description_fails(self, workspace: Path):
        result = invoke("matrix", "add-objective", "annual", "  ")
        assert result.exit_code == 1
        assert "validation: description is required" in result.output

    def test_unknown_kind_rejected_by_parser(self, workspace: Path):
        result = invoke("matrix", "add-objective", "quarterly", "Q3")
        assert result.exit_code != 0

    def test_add_action_and_remove(self, workspace: Path):
        action_id = created_id(invoke("matrix", "add-action", "Kaizen week", "--owner", "Bo"))
        result = invoke("matrix", "remove-action", action_id)
        assert result.exit_code == 0
        assert engine_for(workspace).matrix.list_actions() == []

    def test_remove_missing_objective(self, workspace: Path):
        result = invoke("matrix", "remove-objective", "obj-nope")
        assert result.exit_code == 1
        assert "not_found" in result.output

    def test_show_empty(self, workspace: Path):
        result = invoke("matrix", "show")
        assert result.exit_code == 0
        assert "No objectives yet" in result.output

    def test_show_renders(self, workspace: Path):
        objective_id = created_id(invoke("matrix", "add-objective", "annual", "Ship"))
        metric_id = created_id(invoke("matrix", "add-metric", "Releases", "12", "count"))
        invoke("matrix", "toggle", objective_id, metric_id)

        result = invoke("matrix", "show")

        assert result.exit_code == 0
        assert "(A) Ship" in result.output
        assert "●" in result.output

    def test_bracketed_text_printed_literally(self, workspace: Path):
        invoke("matrix", "add-objective", "annual", "[urgent] Ship")

        result = invoke("matrix", "list")

        assert result.exit_code == 0
        assert "[urgent] Ship" in result.output

    def test_bracketed_ids_printed_literally(self, workspace: Path):
        """Dangling ids are free text and must not be read as markup."""
        result = invoke("matrix", "toggle", "obj[/bold]", "m[red]")

        assert result.exit_code == 0, result.output
        assert "obj[/bold] -> m[red]: strong" in result.output
        strength = engine_for(workspace).matrix.get_strength("obj[/bold]", "m[red]", "metric")
        assert strength.value == "strong"

        dangling = invoke("matrix", "dangling")
        assert dangling.exit_code == 0, dangling.output
        assert "obj[/bold]" in dangling.output

        missing = invoke("matrix", "remove-objective", "obj[/bold]")
        assert missing.exit_code == 1
        assert "not_found" in missing.output

    def test_dangling(self, workspace: Path):
        assert "No dangling links" in invoke("matrix", "dangling").output
        invoke("matrix", "toggle", "obj-ghost", "m-ghost")
        result = invoke("matrix", "dangling")
        assert "Total: 1" in result.output

    def test_summary(self, workspace: Path):
        invoke("matrix", "add-objective", "breakthrough", "Grow")
        result = invoke("matrix", "summary")
        assert result.exit_code == 0
        assert "Breakthrough objectives: 1" in result.output


class TestDepsCommands:
    """Tests for the deps command group."""

    def test_add_and_list(self, workspace: Path):
        dep_id = created_id(
            invoke("deps", "add", "init-1", "init-2", "-d", "Needs data", "--type", "blocks")
        )
        assert dep_id.startswith("dep-")

        result = invoke("deps", "list")
        assert result.exit_code == 0
        assert "Total: 1" in result.output

    def test_self_loop_rejected(self, workspace: Path):
        result = invoke("deps", "add", "init-1", "init-1", "-d", "loop")
        assert result.exit_code == 1
        assert "Cannot create dependency to the same initiative" in result.output
        assert engine_for(workspace).dependencies.list_all() == []

    def test_resolve_twice(self, workspace: Path):
        dep_id = created_id(invoke("deps", "add", "a", "b", "-d", "x"))
        assert invoke("deps", "resolve", dep_id).exit_code == 0
        assert invoke("deps", "resolve", dep_id).exit_code == 0
        assert "No dependencies found" in invoke("deps", "list").output
        assert "Total: 1" in invoke("deps", "list", "--all").output

    def test_resolve_missing(self, workspace: Path):
        result = invoke("deps", "resolve", "dep-nope")
        assert result.exit_code == 1
        assert "not_found" in result.output

    def test_resolve_bracketed_id(self, workspace: Path):
        result = invoke("deps", "resolve", "dep[/x]")
        assert result.exit_code == 1
        assert "dep[/x]" in result.output

    def test_blocking(self, workspace: Path):
        assert "No blocking dependencies" in invoke("deps", "blocking").output
        invoke("deps", "add", "a", "b", "-d", "x", "-t", "informs")
        invoke("deps", "add", "a", "c", "-d", "y")
        assert "Total: 1" in invoke("deps", "blocking").output

    def test_cycles(self, workspace: Path):
        assert invoke("deps", "cycles").exit_code == 0
        invoke("deps", "add", "a", "b", "-d", "x")
        invoke("deps", "add", "b", "a", "-d", "y")

        result = invoke("deps", "cycles")

        assert result.exit_code == 1
        assert "a -> b -> a" in result.output

    def test_summary(self, workspace: Path):
        invoke("deps", "add", "a", "b", "-d", "x")
        result = invoke("deps", "summary")
        assert stat_line(result, "Blocking") == "1"


class TestPdcaCommands:
    """Tests for the pdca command group."""

    def create(self) -> str:
        return created_id(
            invoke(
                "pdca", "create", "Reduce Defects",
                "-d", "Scrap rate is 4%", "-o", "Ann", "-c", "quality",
            )
        )

    def test_reduce_defects_scenario(self, workspace: Path):
        cycle_id = self.create()

        early = invoke("pdca", "complete", cycle_id, "check")
        assert early.exit_code == 1
        assert "invalid_transition" in early.output

        result = invoke("pdca", "complete", cycle_id, "plan", "--notes", "root cause found")
        assert result.exit_code == 0
        assert "Current phase: do" in result.output

        cycle = engine_for(workspace).pdca.get(cycle_id)
        assert cycle.plan.notes == "root cause found"

    def test_complete_all_phases(self, workspace: Path):
        cycle_id = self.create()
        for phase in ("plan", "do", "check", "act"):
            result = invoke("pdca", "complete", cycle_id, phase)
            assert result.exit_code == 0, result.output
        assert f"Cycle {cycle_id} completed" in result.output
        assert "No active cycles" in invoke("pdca", "list").output
        assert "Total: 1" in invoke("pdca", "list", "--status", "completed").output

    def test_missing_owner_rejected(self, workspace: Path):
        result = invoke("pdca", "create", "T", "-d", "D", "-o", " ")
        assert result.exit_code == 1
        assert "owner is required" in result.output

    def test_bad_start_date(self, workspace: Path):
        result = invoke("pdca", "create", "T", "-d", "D", "-o", "Ann", "--start-date", "tomorrow")
        assert result.exit_code == 1
        assert "validation" in result.output

    def test_show(self, workspace: Path):
        cycle_id = self.create()
        invoke("pdca", "complete", cycle_id, "plan", "-n", "5 whys")

        result = invoke("pdca", "show", cycle_id)

        assert result.exit_code == 0
        assert "Reduce Defects" in result.output
        assert "Notes: 5 whys" in result.output

    def test_show_bracketed_initiative(self, workspace: Path):
        cycle_id = created_id(
            invoke("pdca", "create", "T", "-d", "D", "-o", "Ann", "-i", "init[/x]")
        )

        result = invoke("pdca", "show", cycle_id)

        assert result.exit_code == 0, result.output
        assert "Initiative: init[/x]" in result.output

    def test_show_missing(self, workspace: Path):
        assert invoke("pdca", "show", "pdca-nope").exit_code == 1

    def test_list_all_empty(self, workspace: Path):
        result = invoke("pdca", "list", "--status", "all")
        assert result.exit_code == 0
        assert result.output.strip() == "No cycles"

    def test_summary(self, workspace: Path):
        self.create()
        result = invoke("pdca", "summary")
        assert stat_line(result, "Total") == "1"
        assert stat_line(result, "Average progress") == "0%"


class TestMemoryBackendRefused:
    """A memory store would drop every write when the command exits."""

    @pytest.fixture
    def memory_workspace(self, workspace: Path) -> Path:
        (workspace / ".strategy" / "config.yaml").write_text("store:\n  backend: memory\n")
        return workspace

    def test_write_command_refused(self, memory_workspace: Path):
        result = invoke("pdca", "create", "Reduce Defects", "-d", "D", "-o", "Ann")

        assert result.exit_code == 1
        assert "does not persist" in result.output
        assert "PDCA cycle created" not in result.output

    def test_read_command_refused(self, memory_workspace: Path):
        result = invoke("matrix", "list")
        assert result.exit_code == 1
        assert "memory backend" in result.output

    def test_doctor_refused(self, memory_workspace: Path):
        result = invoke("doctor")
        assert result.exit_code == 1
        assert "does not persist" in result.output
