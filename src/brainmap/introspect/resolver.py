"""Class resolution and reflection over source files or dotted identifiers."""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import inspect
import logging
import pkgutil
import re
import sys
import types
from pathlib import Path

from brainmap.errors import ClassNotFoundError
from brainmap.introspect.coverage import CoverageIndex
from brainmap.introspect.docblock import parse_doc_tags
from brainmap.types import ClassDescriptor, ParamRecord

logger = logging.getLogger(__name__)

_CLASS_DECLARATION = re.compile(r"^class\s+(?P<name>[A-Za-z_]\w*)", flags=re.MULTILINE)


class ClassResolver:
    """Turns source files or dotted identifiers into ``ClassDescriptor`` objects.

    File sources are never parsed as Python: the class name comes from the
    first top-level ``class`` statement and the module path from the file's
    location below ``source_root``. The composed identifier is then imported
    and reflected with ``inspect``. Descriptors are cached per identifier.
    """

    def __init__(
        self,
        source_root: str | Path,
        *,
        coverage: CoverageIndex | None = None,
        queue_markers: tuple[str, ...] = ("ShouldQueue",),
    ) -> None:
        self.source_root = Path(source_root).resolve()
        self.coverage = coverage
        self.queue_markers = queue_markers
        self._cache: dict[str, ClassDescriptor] = {}

        import_root = str(self.source_root)
        if import_root not in sys.path:
            sys.path.insert(0, import_root)
        importlib.invalidate_caches()

    def resolve_class(self, source: str | Path) -> ClassDescriptor:
        """Resolve a file path or dotted identifier.

        Raises:
            ClassNotFoundError: The source does not lead to a loadable class.
        """

        if isinstance(source, Path):
            identifier = self.identifier_from_file(source)
        else:
            identifier = source.lstrip(".")

        # Files outside source_root only have a bare class name, so they are keyed by path.
        from_file = isinstance(source, Path) and "." not in identifier
        key = str(source.resolve()) if from_file else identifier
        descriptor = self._cache.get(key)
        if descriptor is None:
            if from_file:
                cls = self._load_from_file(source, identifier)
            else:
                cls = self._load(identifier)
            descriptor = self._reflect(identifier, cls)
            self._cache[key] = descriptor
            logger.debug("Resolved %s", identifier)

        if self.coverage is not None:
            self.coverage.has_test(descriptor.short_name)
        return descriptor

    def identifier_from_file(self, path: Path) -> str:
        """Compose ``<module>.<Class>`` from a file's location and text."""

        match = _CLASS_DECLARATION.search(path.read_text(encoding="utf-8"))
        if match is None:
            raise ClassNotFoundError(str(path), "no class declaration")
        class_name = match.group("name")

        module = module_name_for(path, self.source_root)
        return f"{module}.{class_name}" if module else class_name

    def is_queued(self, descriptor: ClassDescriptor) -> bool:
        return any(marker in descriptor.capabilities for marker in self.queue_markers)

    def _load(self, identifier: str) -> type:
        try:
            obj = pkgutil.resolve_name(identifier)
        except (ImportError, AttributeError, ValueError) as exc:
            raise ClassNotFoundError(identifier, str(exc)) from exc
        if not inspect.isclass(obj):
            raise ClassNotFoundError(identifier, "not a class")
        return obj

    def _load_from_file(self, path: Path, class_name: str) -> type:
        # Only reached for files outside source_root, which have no dotted module path.
        digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:12]
        module_name = f"_brainmap_{path.stem}_{digest}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ClassNotFoundError(str(path), "cannot load file")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        obj = getattr(module, class_name, None)
        if not inspect.isclass(obj):
            raise ClassNotFoundError(class_name, f"not defined in {path}")
        return obj

    def _reflect(self, identifier: str, cls: type) -> ClassDescriptor:
        return ClassDescriptor(
            short_name=cls.__name__,
            qualified_name=identifier,
            capabilities=frozenset(
                base.__name__ for base in inspect.getmro(cls)[1:] if base is not object
            ),
            doc_tags=parse_doc_tags(cls.__dict__.get("__doc__")),
            ctor_params=constructor_params(cls),
            cls=cls,
        )


def module_name_for(path: Path, source_root: Path) -> str | None:
    """Dotted module path of ``path`` relative to ``source_root``, if below it."""

    try:
        relative = path.resolve().relative_to(source_root.resolve())
    except ValueError:
        return None
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts) or None


def evict_modules(root: str | Path) -> int:
    """Drop already-imported modules whose source lives below ``root``.

    Runs start from freshly imported brain modules so edits made since the
    previous run are reflected. Returns the number of evicted modules.
    """

    root_path = Path(root).resolve()
    evicted = [
        name
        for name, module in list(sys.modules.items())
        if any(_is_below(Path(location), root_path) for location in _module_locations(module))
    ]
    for name in evicted:
        del sys.modules[name]
    importlib.invalidate_caches()
    if evicted:
        logger.debug("Evicted %d cached module(s) under %s", len(evicted), root_path)
    return len(evicted)


def _module_locations(module: object) -> list[str]:
    locations = list(getattr(module, "__path__", None) or ())
    location = getattr(module, "__file__", None)
    if location:
        locations.append(location)
    return locations


def _is_below(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root)
    except (OSError, ValueError):
        return False
    return True


def constructor_params(cls: type) -> list[ParamRecord]:
    """Named parameters of ``cls.__init__`` without ``self``."""

    init = getattr(cls, "__init__", object.__init__)
    if init is object.__init__:
        return []
    try:
        signature = inspect.signature(init)
    except (TypeError, ValueError):
        logger.debug("No introspectable constructor on %s", cls.__qualname__)
        return []

    parameters = list(signature.parameters.values())[1:]
    return [
        ParamRecord(name=parameter.name, type=annotation_name(parameter.annotation))
        for parameter in parameters
    ]


def annotation_name(annotation: object) -> str:
    if annotation is inspect.Parameter.empty:
        return "mixed"
    if isinstance(annotation, str):
        return annotation
    if inspect.isclass(annotation) and not isinstance(annotation, types.GenericAlias):
        return annotation.__name__
    return str(annotation).replace("typing.", "")
