"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path

import typer

from ..core.errors import PathResolutionError
from ..core.models import Engine, EngineKind
from ..rendering.detect import engine_from_name
from ..resolution.paths import resolve_path


def parse_engine(value: str) -> EngineKind | None:
    """Parse a forced engine name; empty means detect automatically."""
    if not value:
        return None
    kind = engine_from_name(value, allow_none=True)
    if kind.engine is Engine.UNRECOGNIZED:
        raise typer.BadParameter(
            f"Unknown engine {value!r}; expected tera, liquid, liq, handlebars, hbs or none"
        )
    return kind


def parse_extension(value: str) -> str | None:
    """Parse an extension hint, tolerating a leading dot."""
    extension = value.strip().lstrip(".")
    return extension or None


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e


def parse_path(value: str) -> Path | None:
    """Resolve a user path; empty means not given."""
    if not value:
        return None
    try:
        return resolve_path(value)
    except PathResolutionError as e:
        raise typer.BadParameter(str(e)) from e
