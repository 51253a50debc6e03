"""Width-aware, colour-tagged terminal report of a brain map."""

from __future__ import annotations

from brainmap.errors import EmptyBrainMapError
from brainmap.introspect.coverage import CoverageIndex
from brainmap.report.markup import styled, visible_len
from brainmap.types import CoverageSummary, DomainRecord, ProcessRecord, Report, TaskRecord

ELEMENT_COLORS = {
    "DOMAIN": "#6C7280",
    "PROC": "blue",
    "TASK": "yellow",
    "QERY": "green",
    "TESTED": "green",
    "NOTEST": "red",
}

# One column for the space before the dots, one kept free at the right edge.
FILL_PADDING = 2


class ReportRenderer:
    """Lays out domains as aligned report lines.

    Every entity becomes one line made of fixed segments::

        | lead          | type | test     | name          | fill      | note    |
        |  EXAMPLE      | PROC | NOTEST   | CreateUser    | .........  chained |
        |               | TASK | TESTED   | SendWelcome   | .........   queued |

    The dot fill absorbs whatever width the other segments leave, so every
    line ends one column short of ``terminal_width`` when there is room.
    Layout math only ever counts visible characters.
    """

    def __init__(self, *, show_coverage: bool = True, expand_processes: bool = False) -> None:
        self.show_coverage = show_coverage
        self.expand_processes = expand_processes

    def render(
        self,
        domains: list[DomainRecord],
        coverage: CoverageIndex,
        terminal_width: int,
        min_coverage: float = 0.0,
    ) -> Report:
        if not domains:
            raise EmptyBrainMapError()

        column_width = max(len(domain.name) for domain in domains) + 2
        groups: list[list[str]] = []
        for domain in domains:
            groups.extend(self._domain_groups(domain, column_width, terminal_width))
            if not groups or groups[-1] != [""]:
                groups.append([""])

        lines = [line for group in groups for line in group]
        summary = coverage.summary(min_coverage)
        if not self.show_coverage and summary.passed is None:
            return Report(lines=lines, summary=[], coverage=None)
        return Report(
            lines=lines,
            summary=summary_lines(summary, show_count=self.show_coverage),
            coverage=summary,
        )

    def _domain_groups(
        self, domain: DomainRecord, column_width: int, width: int
    ) -> list[list[str]]:
        label = "  " + styled(domain.name.upper(), ELEMENT_COLORS["DOMAIN"], bold=True)
        label += " " * max(column_width - len(domain.name), 0)
        indent = " " * (2 + column_width)

        groups: list[list[str]] = []
        for process in domain.processes:
            group = [self._process_line(process, label, width)]
            if self.expand_processes:
                group.extend(
                    self._task_line(task, indent, width, index=index)
                    for index, task in enumerate(process.tasks, start=1)
                )
            groups.append(group)
        groups.extend([self._task_line(task, indent, width)] for task in domain.tasks)
        groups.extend(
            [self._line(indent, "QERY", query.has_test, query.name, ".", width)]
            for query in domain.queries
        )
        return groups

    def _process_line(self, process: ProcessRecord, lead: str, width: int) -> str:
        note = " chained" if process.is_chained else "."
        return self._line(lead, "PROC", process.has_test, process.name, note, width)

    def _task_line(self, task: TaskRecord, lead: str, width: int, *, index: int | None = None) -> str:
        note = " queued" if task.is_queued else "."
        name = f"{index}. {task.name}" if index is not None else task.name
        return self._line(lead, "TASK", task.has_test, name, note, width)

    def _line(self, lead: str, kind: str, has_test: bool, name: str, note: str, width: int) -> str:
        head = (
            lead
            + styled(kind, ELEMENT_COLORS[kind], bold=True)
            + " "
            + self._test_segment(has_test)
            + styled(name, "white")
        )
        dots = dot_count(width, visible_len(head) + len(note))
        fill = f" {'.' * dots}" if dots else ""
        return head + styled(fill + note, ELEMENT_COLORS["DOMAIN"])

    def _test_segment(self, has_test: bool) -> str:
        if not self.show_coverage:
            return " "
        tag = "TESTED" if has_test else "NOTEST"
        return f" {styled(tag, ELEMENT_COLORS[tag])}  "


def dot_count(terminal_width: int, used: int) -> int:
    """Dots that fit after ``used`` visible columns; never negative."""
    return max(terminal_width - used - FILL_PADDING, 0)


def summary_lines(summary: CoverageSummary, *, show_count: bool = True) -> list[str]:
    """TESTS count line followed by the PASS/FAIL verdict when a minimum is set."""

    lines: list[str] = []
    if show_count:
        lines.append(
            "  "
            + styled("TESTS:  ", "white", bold=True)
            + styled(f"{summary.tested}/{summary.total}", "green", bold=True)
        )
    if summary.passed is None:
        return lines

    actual = f"{summary.percentage:.1f}%"
    minimum = f"{summary.minimum:.1f}%"
    if summary.passed:
        lines.append(
            "  "
            + styled(" PASS ", bg="green", bold=True)
            + "  "
            + styled("Coverage", "white", bold=True)
            + " "
            + styled(actual, "green", bold=True)
            + ". "
            + styled("Minimum", "white", bold=True)
            + " "
            + styled(minimum, "white", bold=True)
        )
    else:
        lines.append(
            "  "
            + styled(" FAIL ", bg="red", bold=True)
            + "  Test coverage below expected: "
            + styled(actual, "red", bold=True)
            + ". Minimum: "
            + styled(minimum, "white", bold=True)
        )
    return lines
