"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Direction = Literal["input", "output"]


@dataclass(slots=True)
class PropertyRecord:
    """A task property declared through a documentation tag."""

    name: str
    type: str
    direction: Direction


@dataclass(slots=True)
class ParamRecord:
    """A named constructor parameter of a query."""

    name: str
    type: str = "mixed"


@dataclass(slots=True)
class DocTag:
    """One ``@kind type name`` tag parsed from a class docstring."""

    kind: str
    type: str
    name: str


@dataclass(slots=True)
class ClassDescriptor:
    """Structural facts about a resolved class."""

    short_name: str
    qualified_name: str
    capabilities: frozenset[str]
    doc_tags: list[DocTag]
    ctor_params: list[ParamRecord]
    cls: type = field(repr=False, compare=False)


@dataclass(slots=True)
class TaskRecord:
    name: str
    full_name: str
    is_queued: bool
    properties: list[PropertyRecord]
    has_test: bool


@dataclass(slots=True)
class ProcessRecord:
    name: str
    full_name: str
    is_chained: bool
    tasks: list[TaskRecord]
    has_test: bool


@dataclass(slots=True)
class QueryRecord:
    name: str
    full_name: str
    properties: list[ParamRecord]
    has_test: bool


@dataclass(slots=True)
class DomainRecord:
    """One top-level domain folder with its processes, tasks and queries."""

    name: str
    path: str
    processes: list[ProcessRecord] = field(default_factory=list)
    tasks: list[TaskRecord] = field(default_factory=list)
    queries: list[QueryRecord] = field(default_factory=list)


@dataclass(slots=True)
class CoverageSummary:
    """Aggregate test coverage against an optional minimum percentage."""

    tested: int
    total: int
    minimum: float = 0.0

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.tested / self.total) * 100.0

    @property
    def passed(self) -> bool | None:
        if self.minimum <= 0:
            return None
        return self.percentage >= self.minimum


@dataclass(slots=True)
class Report:
    """Rendered display lines plus the coverage summary block."""

    lines: list[str]
    summary: list[str]
    coverage: CoverageSummary | None

    @property
    def all_lines(self) -> list[str]:
        return [*self.lines, *self.summary]
