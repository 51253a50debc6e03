"""Test coverage index keyed by class short name."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from brainmap.types import CoverageSummary

logger = logging.getLogger(__name__)


class CoverageIndex:
    """Remembers whether a ``<ShortName>Test`` file exists under a test root.

    The index is keyed by short name only, so two classes sharing a short
    name in different domains share one entry. Build a new index for every
    run; results are never invalidated.
    """

    def __init__(
        self,
        test_directory: str | Path | None,
        *,
        file_pattern: str = "{name}Test.py",
    ) -> None:
        self.test_directory = Path(test_directory) if test_directory is not None else None
        self.file_pattern = file_pattern
        self._results: dict[str, bool] = {}

    def has_test(self, short_name: str) -> bool:
        cached = self._results.get(short_name)
        if cached is not None:
            return cached

        found = self._search(self.file_pattern.format(name=short_name))
        self._results[short_name] = found
        return found

    @property
    def results(self) -> Mapping[str, bool]:
        return MappingProxyType(self._results)

    @property
    def tested(self) -> int:
        return sum(1 for value in self._results.values() if value)

    def summary(self, minimum: float = 0.0) -> CoverageSummary:
        return CoverageSummary(tested=self.tested, total=len(self._results), minimum=minimum)

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._results

    def _search(self, filename: str) -> bool:
        if self.test_directory is None or not self.test_directory.is_dir():
            logger.debug("Test directory %s missing; %s counted as untested", self.test_directory, filename)
            return False

        for _dirpath, _dirnames, filenames in os.walk(self.test_directory):
            if filename in filenames:
                return True
        return False
