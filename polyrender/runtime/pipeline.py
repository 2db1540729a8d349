"""One pass of the render chain: load, resolve context, detect, render, emit."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.models import RenderOutcome, RunOptions, TemplateSource
from ..rendering import detect, engine, io
from ..resolution.context import resolve_context
from ..settings import Settings, get_settings

logger = logging.getLogger(__name__)


def load_source(options: RunOptions, stdin_contents: str | None = None) -> TemplateSource:
    """Load the template for this pass.

    File templates are re-read every pass; STDIN content is captured once by
    the caller and handed in as ``stdin_contents``.
    """
    if options.template_path is not None:
        return io.read_template(options.template_path)
    return TemplateSource(contents=stdin_contents or "")


def render_once(
    options: RunOptions,
    *,
    stdin_contents: str | None = None,
    cwd: Path | None = None,
    settings: Settings | None = None,
) -> RenderOutcome:
    """Run the full chain once and emit the result.

    Args:
        options: Paths, targets and overrides for the pass
        stdin_contents: Template body in STDIN mode
        cwd: Working directory for the last-resort default context
        settings: Naming and engine configuration

    Returns:
        The rendered outcome that was emitted
    """
    settings = settings or get_settings()

    source = load_source(options, stdin_contents)
    context = resolve_context(
        options.context_path, source.origin, cwd=cwd, settings=settings
    )
    detection = detect.detect(source, options.engine)
    outcome = engine.render(
        detection.contents,
        context,
        detection.kind,
        options.extension,
        template_path=source.origin,
        settings=settings,
    )
    io.emit(outcome, options.targets)
    return outcome
