"""Brain map: scaffold and introspect Domain/Process/Task/Query packages."""

from .config import BrainSettings

__all__ = ["BrainSettings"]
