"""JSON context discovery and loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..core.errors import ContextParseError, ContextReadError
from ..core.models import ContextDocument
from ..settings import Settings, get_settings

logger = logging.getLogger(__name__)


def context_candidates(
    template_path: Path | None,
    *,
    cwd: Path | None = None,
    settings: Settings | None = None,
) -> list[Path]:
    """List implicit context files for a template, most specific first.

    Args:
        template_path: Template file, or None in STDIN mode
        cwd: Working directory holding the last-resort default context
        settings: Naming configuration

    Returns:
        ``<stem><suffix>`` and the default context beside the template,
        followed by the default context in the working directory
    """
    settings = settings or get_settings()
    candidates: list[Path] = []
    if template_path is not None:
        folder = template_path.parent
        candidates.append(folder / f"{template_path.stem}{settings.context_suffix}")
        candidates.append(folder / settings.default_context_name)
    candidates.append((cwd or Path.cwd()) / settings.default_context_name)
    return candidates


def find_context_path(
    explicit_path: Path | None,
    template_path: Path | None,
    *,
    cwd: Path | None = None,
    settings: Settings | None = None,
) -> Path:
    """Pick the context file to load, first match wins.

    An explicit path is returned without checking it exists; the last
    candidate is returned even when missing so the read error names it.
    """
    if explicit_path is not None:
        return explicit_path

    candidates = context_candidates(template_path, cwd=cwd, settings=settings)
    for candidate in candidates[:-1]:
        if candidate.is_file():
            return candidate
    return candidates[-1]


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def load_context(path: Path) -> ContextDocument:
    """Read and parse a JSON context file.

    Raises:
        ContextReadError: If the file cannot be read
        ContextParseError: If the file is not well-formed JSON
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContextReadError(f"cannot read context file: {e}", path=path) from e

    try:
        value = json.loads(raw, parse_constant=_reject_constant)
    except (json.JSONDecodeError, ValueError) as e:
        raise ContextParseError(f"invalid JSON: {e}", path=path) from e

    return ContextDocument(value=value, source_path=path)


def resolve_context(
    explicit_path: Path | None,
    template_path: Path | None,
    *,
    cwd: Path | None = None,
    settings: Settings | None = None,
) -> ContextDocument:
    """Locate and load the JSON context for a template."""
    path = find_context_path(explicit_path, template_path, cwd=cwd, settings=settings)
    logger.debug(f"Using context {path}")
    return load_context(path)
