"""Stamps process/task/query modules (and test stubs) into a brain package."""

from __future__ import annotations

import keyword
import logging
import re
from collections.abc import Sequence
from pathlib import Path

from brainmap.config import BrainSettings
from brainmap.errors import ScaffoldError
from brainmap.introspect.resolver import module_name_for
from brainmap.scaffold.templates import (
    PROCESS_TEMPLATE,
    QUERY_TEMPLATE,
    TASK_TEMPLATE,
    TEST_TEMPLATE,
)

logger = logging.getLogger(__name__)

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


class ScaffoldGenerator:
    """Writes new modules under ``<root>/<domain>/<category>/``.

    Existing files are never overwritten. Directories created on the way
    receive an empty ``__init__.py`` so the result is importable.
    """

    def __init__(self, settings: BrainSettings) -> None:
        self.settings = settings

    def make_process(
        self,
        domain: str,
        name: str,
        *,
        tasks: Sequence[str] = (),
        chain: bool = False,
    ) -> Path:
        source = PROCESS_TEMPLATE.format(
            name=name,
            domain=domain,
            chain=repr(chain),
            tasks=", ".join(repr(task) for task in tasks),
        )
        return self._write(domain, self.settings.processes_dir, name, source)

    def make_task(self, domain: str, name: str, *, queued: bool = False) -> Path:
        bases = "ShouldQueue, Task" if queued else "Task"
        source = TASK_TEMPLATE.format(name=name, domain=domain, bases=bases, bases_import=bases)
        return self._write(domain, self.settings.tasks_dir, name, source)

    def make_query(self, domain: str, name: str) -> Path:
        source = QUERY_TEMPLATE.format(name=name, domain=domain)
        return self._write(domain, self.settings.queries_dir, name, source)

    def make_test(self, domain: str, name: str, module_path: Path) -> Path:
        """Write ``<test_directory>/<domain>/<Name>Test.py`` for a generated module."""

        if self.settings.test_directory is None:
            raise ScaffoldError("No test directory configured")
        module = module_name_for(module_path, self.settings.source_root or self.settings.root.parent)
        if module is None:
            raise ScaffoldError(f"{module_path} is outside the source root")

        target = (
            self.settings.test_directory
            / domain
            / self.settings.test_file_pattern.format(name=name)
        )
        source = TEST_TEMPLATE.format(
            module=module,
            name=name,
            snake=snake_case(name),
            collect_glob=self.settings.test_file_pattern.format(name="*"),
        )
        return self._create(target, source)

    def _write(self, domain: str, category: str, name: str, source: str) -> Path:
        _validate(domain, name)
        directory = self.settings.root / domain / category
        for package in (self.settings.root / domain, directory):
            package.mkdir(parents=True, exist_ok=True)
            init = package / "__init__.py"
            if not init.exists():
                init.touch()
        return self._create(directory / f"{snake_case(name)}.py", source)

    @staticmethod
    def _create(target: Path, source: str) -> Path:
        if target.exists():
            raise ScaffoldError(f"{target} already exists")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")
        logger.info("Created %s", target)
        return target


def snake_case(name: str) -> str:
    """``CreateHTTPUser`` -> ``create_http_user``."""
    return _WORD_BOUNDARY.sub(r"\1_\2", _ACRONYM_BOUNDARY.sub(r"\1_\2", name)).lower()


def _validate(domain: str, name: str) -> None:
    if not domain.isidentifier() or keyword.iskeyword(domain) or domain.startswith("_"):
        raise ScaffoldError(f"Invalid domain name: {domain!r}")
    if not name.isidentifier() or keyword.iskeyword(name) or not name[0].isupper():
        raise ScaffoldError(f"Class names must be CapWords identifiers: {name!r}")
