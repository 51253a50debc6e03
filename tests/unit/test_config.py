from pathlib import Path

import pytest
from pydantic import ValidationError

from brainmap.config import BrainSettings


def test_defaults_derive_source_root_from_brain_root() -> None:
    settings = BrainSettings(root=Path("app/brain"))

    assert settings.source_root == Path("app")
    assert settings.test_directory == Path("tests/brain")
    assert settings.test_minimum_coverage == 0.0
    assert settings.test_file_pattern == "{name}Test.py"
    assert settings.queue_markers == ("ShouldQueue",)
    assert (settings.processes_dir, settings.tasks_dir, settings.queries_dir) == (
        "processes",
        "tasks",
        "queries",
    )


def test_explicit_source_root_is_kept() -> None:
    settings = BrainSettings(root=Path("app/brain"), source_root=Path("."))

    assert settings.source_root == Path(".")


def test_from_env_reads_brain_variables(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BRAIN_ROOT", str(tmp_path / "brain"))
    monkeypatch.setenv("BRAIN_TEST_DIRECTORY", str(tmp_path / "tests"))
    monkeypatch.setenv("BRAIN_TEST_MINIMUM_COVERAGE", "75")
    monkeypatch.delenv("BRAIN_SOURCE_ROOT", raising=False)

    settings = BrainSettings.from_env()

    assert settings.root == tmp_path / "brain"
    assert settings.source_root == tmp_path
    assert settings.test_directory == tmp_path / "tests"
    assert settings.test_minimum_coverage == 75.0


def test_from_env_overrides_win_and_none_is_ignored(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BRAIN_ROOT", str(tmp_path / "brain"))
    monkeypatch.setenv("BRAIN_TEST_MINIMUM_COVERAGE", "75")

    settings = BrainSettings.from_env(root=tmp_path / "other", test_minimum_coverage=None)

    assert settings.root == tmp_path / "other"
    assert settings.test_minimum_coverage == 75.0


def test_from_env_defaults_to_app_brain(monkeypatch) -> None:
    for name in ("BRAIN_ROOT", "BRAIN_SOURCE_ROOT", "BRAIN_TEST_DIRECTORY", "BRAIN_TEST_MINIMUM_COVERAGE"):
        monkeypatch.delenv(name, raising=False)

    assert BrainSettings.from_env().root == Path("app/brain")


def test_coverage_out_of_range_is_rejected() -> None:
    with pytest.raises(ValidationError):
        BrainSettings(root=Path("app/brain"), test_minimum_coverage=120)


def test_pattern_without_placeholder_is_rejected() -> None:
    with pytest.raises(ValidationError, match="placeholder"):
        BrainSettings(root=Path("app/brain"), test_file_pattern="Test.py")
