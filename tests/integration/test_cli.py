import json
from pathlib import Path

from typer.testing import CliRunner

from brainmap.cli import app

APP = Path(__file__).resolve().parents[1] / "fixtures" / "app"
ROOT = APP / "brain"
APP_TESTS = APP.parent / "app_tests"

runner = CliRunner()


def _show(*args: str):
    return runner.invoke(app, ["show", "--root", str(ROOT), "--test-dir", str(APP_TESTS), *args])


def test_show_prints_every_domain_in_name_order() -> None:
    result = _show("--no-coverage", "--width", "71")

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("  EXAMPLE   PROC  ExampleProcess ")
    assert "TESTS:" not in result.output
    assert "NOTEST" not in result.output
    domains = [line.split()[0] for line in lines if line.startswith("  ") and not line.startswith("   ")]
    assert domains == ["EXAMPLE", "EXAMPLE2"]


def test_show_reports_coverage_summary() -> None:
    result = _show("--width", "90")

    assert result.exit_code == 0, result.output
    assert "TESTED" in result.output
    assert "TESTS:  3/7" in result.output


def test_show_fails_below_minimum_coverage() -> None:
    result = _show("--width", "90", "--min-coverage", "95")

    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert "Test coverage below expected: 42.9%. Minimum: 95.0%" in result.output


def test_show_passes_at_or_above_minimum_coverage() -> None:
    result = _show("--width", "90", "--min-coverage", "30")

    assert result.exit_code == 0, result.output
    assert "PASS" in result.output


def test_show_missing_root_exits_with_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["show", "--root", str(tmp_path / "nowhere")])

    assert result.exit_code == 1
    assert "Brain directory not found" in result.output


def test_show_empty_brain_exits_with_error() -> None:
    result = runner.invoke(app, ["show", "--root", str(APP / "empty_brain"), "--source-root", str(APP)])

    assert result.exit_code == 1
    assert "The brain map is empty." in result.output


def test_show_json_dumps_the_map() -> None:
    result = _show("--json")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [domain["name"] for domain in payload] == ["example", "example2", "example3"]
    assert payload[0]["tasks"][3]["is_queued"] is True


def test_make_commands_create_modules(tmp_path: Path) -> None:
    root = tmp_path / f"brain_{tmp_path.name}"
    tests_dir = tmp_path / "tests"

    task = runner.invoke(
        app,
        ["make-task", "orders", "ShipOrder", "--root", str(root), "--queued", "--with-test", "--test-dir", str(tests_dir)],
    )
    process = runner.invoke(
        app,
        ["make-process", "orders", "Fulfil", "--root", str(root), "--chain", "--task", "x.ShipOrder"],
    )
    query = runner.invoke(app, ["make-query", "orders", "PendingOrders", "--root", str(root)])

    assert task.exit_code == 0, task.output
    assert process.exit_code == 0, process.output
    assert query.exit_code == 0, query.output
    assert (root / "orders" / "tasks" / "ship_order.py").exists()
    assert (tests_dir / "orders" / "ShipOrderTest.py").exists()
    assert "chain = True" in (root / "orders" / "processes" / "fulfil.py").read_text(encoding="utf-8")
    assert "Created" in query.output


def test_make_command_refuses_to_overwrite(tmp_path: Path) -> None:
    root = tmp_path / "brain_overwrite"
    runner.invoke(app, ["make-query", "orders", "PendingOrders", "--root", str(root)])

    result = runner.invoke(app, ["make-query", "orders", "PendingOrders", "--root", str(root)])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_show_without_tags_still_fails_below_minimum() -> None:
    result = _show("--no-coverage", "--width", "90", "--min-coverage", "95")

    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert "TESTS:" not in result.output
    assert "NOTEST" not in result.output
