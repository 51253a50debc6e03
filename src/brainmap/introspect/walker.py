"""Domain walker: root folder -> domain records with resolved process chains."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from pathlib import Path

from brainmap.config import BrainSettings
from brainmap.errors import BrainRootNotFoundError, ClassNotFoundError
from brainmap.introspect.coverage import CoverageIndex
from brainmap.introspect.docblock import properties_from_tags
from brainmap.introspect.resolver import ClassResolver, evict_modules
from brainmap.types import (
    ClassDescriptor,
    DomainRecord,
    ProcessRecord,
    QueryRecord,
    TaskRecord,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntrospectionContext:
    """Per-run state shared by the walker, resolver and renderer."""

    settings: BrainSettings
    coverage: CoverageIndex
    resolver: ClassResolver

    @classmethod
    def from_settings(cls, settings: BrainSettings) -> "IntrospectionContext":
        evict_modules(settings.root)
        coverage = CoverageIndex(
            settings.test_directory,
            file_pattern=settings.test_file_pattern,
        )
        resolver = ClassResolver(
            settings.source_root or settings.root.parent,
            coverage=coverage,
            queue_markers=settings.queue_markers,
        )
        return cls(settings=settings, coverage=coverage, resolver=resolver)


class DomainWalker:
    """Builds one ``DomainRecord`` per subdirectory of the brain root.

    Missing ``processes``/``tasks``/``queries`` folders give empty lists.
    Any class that cannot be resolved at the top level aborts the run; only
    task references inside a process chain are allowed to be missing.
    """

    def __init__(self, context: IntrospectionContext) -> None:
        self.context = context
        self.settings = context.settings
        self.resolver = context.resolver

    def build_map(self, root: str | Path | None = None) -> list[DomainRecord]:
        root_path = Path(root) if root is not None else self.settings.root
        if not root_path.is_dir():
            raise BrainRootNotFoundError(root_path)

        domains = [
            DomainRecord(
                name=entry.name,
                path=str(entry),
                processes=self.load_processes(entry),
                tasks=self.load_tasks(entry),
                queries=self.load_queries(entry),
            )
            for entry in root_path.iterdir()
            if entry.is_dir() and not _is_private(entry.name)
        ]
        logger.info("Mapped %d domain(s) under %s", len(domains), root_path)
        return domains

    def load_processes(self, domain_path: Path) -> list[ProcessRecord]:
        records: list[ProcessRecord] = []
        for source in self._sources(domain_path / self.settings.processes_dir):
            descriptor = self.resolver.resolve_class(source)
            records.append(
                ProcessRecord(
                    name=descriptor.short_name,
                    full_name=descriptor.qualified_name,
                    is_chained=bool(getattr(descriptor.cls, "chain", False)),
                    tasks=self.resolve_process_tasks(descriptor),
                    has_test=self.context.coverage.has_test(descriptor.short_name),
                )
            )
        return records

    def load_tasks(self, domain_path: Path) -> list[TaskRecord]:
        return [self.task_record(source) for source in self._sources(domain_path / self.settings.tasks_dir)]

    def load_queries(self, domain_path: Path) -> list[QueryRecord]:
        records: list[QueryRecord] = []
        for source in self._sources(domain_path / self.settings.queries_dir):
            descriptor = self.resolver.resolve_class(source)
            records.append(
                QueryRecord(
                    name=descriptor.short_name,
                    full_name=descriptor.qualified_name,
                    properties=list(descriptor.ctor_params),
                    has_test=self.context.coverage.has_test(descriptor.short_name),
                )
            )
        return records

    def task_record(self, source: str | Path) -> TaskRecord:
        descriptor = self.resolver.resolve_class(source)
        return TaskRecord(
            name=descriptor.short_name,
            full_name=descriptor.qualified_name,
            is_queued=self.resolver.is_queued(descriptor),
            properties=properties_from_tags(descriptor.doc_tags),
            has_test=self.context.coverage.has_test(descriptor.short_name),
        )

    def resolve_process_tasks(self, process: ClassDescriptor) -> list[TaskRecord]:
        """Resolve the process's static ``tasks`` list, dropping unknown entries."""

        tasks: list[TaskRecord] = []
        for reference in getattr(process.cls, "tasks", None) or ():
            identifier = task_identifier(reference)
            try:
                tasks.append(self.task_record(identifier))
            except ClassNotFoundError:
                logger.debug("Dropped unresolved task %s from %s", identifier, process.short_name)
        return tasks

    @staticmethod
    def _sources(directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix == ".py" and not _is_private(path.name)
        )


def task_identifier(reference: object) -> str:
    """Dotted identifier for a task class or an identifier string."""

    if inspect.isclass(reference):
        return f"{reference.__module__}.{reference.__qualname__}"
    return str(reference)


def build_brain_map(settings: BrainSettings) -> tuple[list[DomainRecord], IntrospectionContext]:
    """Walk the brain once with a fresh context."""

    context = IntrospectionContext.from_settings(settings)
    return DomainWalker(context).build_map(), context


def _is_private(name: str) -> bool:
    return name.startswith(("_", "."))
