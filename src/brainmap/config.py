"""Configuration models for brain introspection and scaffolding."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class BrainSettings(BaseModel):
    """Configures where the brain lives and how coverage is judged."""

    root: Path
    source_root: Path | None = None
    test_directory: Path | None = Path("tests/brain")
    test_minimum_coverage: float = Field(default=0.0, ge=0.0, le=100.0)
    test_file_pattern: str = "{name}Test.py"
    show_coverage: bool = True
    queue_markers: tuple[str, ...] = ("ShouldQueue",)
    processes_dir: str = "processes"
    tasks_dir: str = "tasks"
    queries_dir: str = "queries"

    @model_validator(mode="after")
    def _default_source_root(self) -> "BrainSettings":
        # The brain package itself is importable from its parent directory.
        if self.source_root is None:
            self.source_root = self.root.parent
        if "{name}" not in self.test_file_pattern:
            raise ValueError("test_file_pattern must contain a {name} placeholder")
        return self

    @classmethod
    def from_env(cls, **overrides: object) -> "BrainSettings":
        """Build settings from ``BRAIN_*`` environment variables."""
        values: dict[str, object] = {"root": os.getenv("BRAIN_ROOT", "app/brain")}
        if source_root := os.getenv("BRAIN_SOURCE_ROOT"):
            values["source_root"] = source_root
        if test_directory := os.getenv("BRAIN_TEST_DIRECTORY"):
            values["test_directory"] = test_directory
        if minimum := os.getenv("BRAIN_TEST_MINIMUM_COVERAGE"):
            values["test_minimum_coverage"] = minimum
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)
