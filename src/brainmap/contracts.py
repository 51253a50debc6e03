"""Base classes for processes, tasks and queries living in a brain package.

The introspection engine only relies on names and attributes (``chain``,
``tasks``, a ``ShouldQueue`` base, constructor signatures and class
docstrings), so projects may also define their own equivalents.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, ClassVar


class ShouldQueue:
    """Marker base: the task may run on a queue instead of inline."""


class Task:
    """A unit of work.

    Declare the task's payload in the class docstring::

        @property-read int payment_id
        @property str email
    """

    def __init__(self, payload: dict[str, Any] | None = None) -> None:
        self.payload = dict(payload or {})


class Process:
    """An ordered list of tasks, optionally run as a chain."""

    chain: ClassVar[bool] = False
    tasks: ClassVar[Sequence[type | str]] = ()

    def __init__(self, payload: dict[str, Any] | None = None) -> None:
        self.payload = dict(payload or {})


class Query(ABC):
    """A read-only lookup parameterised by typed constructor arguments."""

    @abstractmethod
    def handle(self) -> Any:
        """Run the lookup and return its result."""
