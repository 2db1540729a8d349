"""Error taxonomy for the render pipeline.

Each error carries the pipeline stage it was raised in and, where one is
known, the offending path. ``str(error)`` is stable for identical failures,
which the watch loop relies on to suppress repeats.
"""

from __future__ import annotations

from pathlib import Path


class PolyrenderError(Exception):
    """Base class for all pipeline failures."""

    stage = "rendering"

    def __init__(
        self, message: str, *, path: Path | None = None, stage: str | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        text = f"{self.stage}: {self.message}"
        if self.path is not None:
            text += f" ({self.path})"
        return text


class PathResolutionError(PolyrenderError):
    stage = "resolving path"


class TemplateReadError(PolyrenderError):
    stage = "reading template"


class ContextReadError(PolyrenderError):
    stage = "reading context"


class ContextParseError(PolyrenderError):
    stage = "parsing context"


class EngineUnrecognizedError(PolyrenderError):
    """Raised when a magic comment names an engine we do not know."""

    stage = "detecting engine"

    def __init__(self, name: str, *, path: Path | None = None) -> None:
        super().__init__(f"unrecognized template engine {name!r}", path=path)
        self.name = name


class ParserBuildError(PolyrenderError):
    stage = "building parser"


class TemplateParseError(PolyrenderError):
    stage = "parsing"


class RenderError(PolyrenderError):
    """Raised by an engine while rendering, or when it rejects the context."""

    stage = "rendering"


class OutputWriteError(PolyrenderError):
    stage = "writing output"
