"""Engine detection.

Precedence, highest first:

1. an engine forced by the caller
2. the template's file extension (``.tera``, ``.hbs``, ``.liq``)
3. a ``<!--template NAME-->`` magic comment anywhere in the content
4. no engine: the content passes through untouched
"""

from __future__ import annotations

import logging
import re

from ..core.models import Detection, Engine, EngineKind, TemplateSource

logger = logging.getLogger(__name__)

EXTENSION_ENGINES: dict[str, Engine] = {
    "tera": Engine.TERA,
    "hbs": Engine.HANDLEBARS,
    "liq": Engine.LIQUID,
}

MARKER_ENGINES: dict[str, Engine] = {
    "tera": Engine.TERA,
    "hbs": Engine.HANDLEBARS,
    "handlebars": Engine.HANDLEBARS,
    "liq": Engine.LIQUID,
    "liquid": Engine.LIQUID,
}

FORCED_ENGINES: dict[str, Engine] = {**MARKER_ENGINES, "none": Engine.NONE}

MAGIC_COMMENT = re.compile(r"<!--template\s+([\w.+-]+?)\s*-->", re.IGNORECASE)


def engine_from_name(name: str, *, allow_none: bool = False) -> EngineKind:
    """Map an engine name (case-insensitive) to an :class:`EngineKind`.

    Unknown names yield ``EngineKind.unrecognized(name)``; ``none`` is only
    known when ``allow_none`` is set.
    """
    table = FORCED_ENGINES if allow_none else MARKER_ENGINES
    engine = table.get(name.strip().lower())
    if engine is None:
        return EngineKind.unrecognized(name)
    return EngineKind.of(engine)


def engine_from_extension(extension: str | None) -> EngineKind | None:
    """Return the engine owning ``extension`` (case-sensitive, no dot), if any."""
    if not extension:
        return None
    engine = EXTENSION_ENGINES.get(extension)
    return EngineKind.of(engine) if engine is not None else None


def strip_magic_comment(contents: str) -> tuple[str, str] | None:
    """Find the first magic comment.

    Returns:
        ``(engine_name, remaining_content)`` with the comment removed and the
        rest trimmed, or None when there is no comment
    """
    match = MAGIC_COMMENT.search(contents)
    if match is None:
        return None
    remaining = contents[: match.start()] + contents[match.end() :]
    return match.group(1), remaining.strip()


def detect(
    source: TemplateSource,
    forced: EngineKind | None = None,
    declared_extension: str | None = None,
) -> Detection:
    """Decide which engine renders ``source``.

    Args:
        source: Template body and origin
        forced: Engine chosen by the user; skips all inspection
        declared_extension: Extension to classify by (default: the origin's)

    Returns:
        Detection with the chosen engine and the content to hand it
    """
    if forced is not None:
        logger.debug(f"Engine forced to {forced}")
        return Detection(kind=forced, contents=source.contents)

    extension = declared_extension if declared_extension is not None else source.extension
    by_extension = engine_from_extension(extension)
    if by_extension is not None:
        logger.debug(f"Engine {by_extension} selected by extension .{extension}")
        return Detection(kind=by_extension, contents=source.contents)

    marker = strip_magic_comment(source.contents)
    if marker is not None:
        name, remaining = marker
        kind = engine_from_name(name)
        logger.debug(f"Engine {kind} selected by magic comment")
        return Detection(kind=kind, contents=remaining)

    return Detection(kind=EngineKind.of(Engine.NONE), contents=source.contents)
