"""FastAPI entrypoint exposing the brain map and report as JSON."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException, Query

from brainmap.config import BrainSettings
from brainmap.errors import (
    BrainMapError,
    BrainRootNotFoundError,
    ClassNotFoundError,
    EmptyBrainMapError,
)
from brainmap.introspect.walker import IntrospectionContext, build_brain_map
from brainmap.report.markup import strip_markup
from brainmap.report.renderer import ReportRenderer
from brainmap.types import DomainRecord

app = FastAPI(title="Brain Map", version="0.1.0")


def _load() -> tuple[BrainSettings, list[DomainRecord], IntrospectionContext]:
    # Settings are re-read and the brain re-walked on every request.
    settings = BrainSettings.from_env()
    try:
        domains, context = build_brain_map(settings)
    except BrainMapError as exc:
        raise _http_error(exc) from exc
    domains.sort(key=lambda domain: domain.name)
    return settings, domains, context


def _http_error(exc: BrainMapError) -> HTTPException:
    if isinstance(exc, BrainRootNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, EmptyBrainMapError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, ClassNotFoundError):
        return HTTPException(status_code=500, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


@app.get("/health")
def health() -> dict[str, Any]:
    settings = BrainSettings.from_env()
    return {
        "status": "ok",
        "root": str(settings.root),
        "root_exists": settings.root.is_dir(),
        "test_directory": str(settings.test_directory) if settings.test_directory else None,
    }


@app.get("/map")
def brain_map() -> dict[str, Any]:
    _, domains, context = _load()
    return {
        "domains": [asdict(domain) for domain in domains],
        "tested": dict(context.coverage.results),
    }


@app.get("/report")
def report(
    width: int = Query(default=80, ge=0, le=1000),
    plain: bool = False,
) -> dict[str, Any]:
    settings, domains, context = _load()
    renderer = ReportRenderer(show_coverage=settings.show_coverage)
    try:
        rendered = renderer.render(domains, context.coverage, width, settings.test_minimum_coverage)
    except BrainMapError as exc:
        raise _http_error(exc) from exc

    lines = rendered.all_lines
    coverage = rendered.coverage
    return {
        "lines": [strip_markup(line) for line in lines] if plain else lines,
        "coverage": (
            {
                "tested": coverage.tested,
                "total": coverage.total,
                "percentage": coverage.percentage,
                "minimum": coverage.minimum,
                "passed": coverage.passed,
            }
            if coverage is not None
            else None
        ),
    }
