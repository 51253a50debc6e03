"""Exception taxonomy for introspection, rendering and scaffolding."""

from __future__ import annotations


class BrainMapError(Exception):
    """Base class for every error raised by brainmap."""


class BrainRootNotFoundError(BrainMapError):
    """The configured brain root is not an existing directory."""

    def __init__(self, root: object) -> None:
        super().__init__(f"Brain directory not found: {root}")
        self.root = root


class EmptyBrainMapError(BrainMapError):
    """Rendering was requested for a map without domains."""

    def __init__(self) -> None:
        super().__init__("The brain map is empty.")


class ClassNotFoundError(BrainMapError):
    """A class identifier or source file could not be resolved to a class."""

    def __init__(self, identifier: str, reason: str | None = None) -> None:
        message = f"Class not found: {identifier}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.identifier = identifier


class ScaffoldError(BrainMapError):
    """A scaffold target is invalid or already exists."""
