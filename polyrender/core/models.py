"""Domain models for a single render pass and the watch loop."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Engine(str, Enum):
    """Templating engines known to the renderer."""

    TERA = "tera"
    HANDLEBARS = "handlebars"
    LIQUID = "liquid"
    NONE = "none"
    UNRECOGNIZED = "unrecognized"


class EngineKind(BaseModel):
    """Tagged union over :class:`Engine`; ``name`` is only set for unrecognized engines."""

    model_config = ConfigDict(frozen=True)

    engine: Engine
    name: str | None = None

    @classmethod
    def of(cls, engine: Engine) -> EngineKind:
        return cls(engine=engine)

    @classmethod
    def unrecognized(cls, name: str) -> EngineKind:
        return cls(engine=Engine.UNRECOGNIZED, name=name)

    def __str__(self) -> str:
        if self.engine is Engine.UNRECOGNIZED:
            return f"unrecognized({self.name})"
        return self.engine.value


class TemplateSource(BaseModel):
    """Template body for one render pass; ``origin`` is None when read from STDIN."""

    model_config = ConfigDict(frozen=True)

    contents: str = Field(..., description="Template body")
    origin: Path | None = Field(default=None, description="Template file path")

    @property
    def extension(self) -> str | None:
        if self.origin is None or not self.origin.suffix:
            return None
        return self.origin.suffix[1:]


class Detection(BaseModel):
    """Engine chosen for a template plus the content that engine should render."""

    model_config = ConfigDict(frozen=True)

    kind: EngineKind
    contents: str


class ContextDocument(BaseModel):
    """Parsed JSON context and the file it came from."""

    model_config = ConfigDict(frozen=True)

    value: Any = Field(..., description="Parsed JSON value")
    source_path: Path = Field(..., description="Context file path")


class RenderOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    rendered_text: str


class OutputTargets(BaseModel):
    """Where rendered text goes after a successful pass."""

    path: Path | None = Field(default=None, description="Output file path")
    stdout: bool = False
    stderr: bool = False
    file_mode: int = Field(default=0o644, description="File permissions (octal)")


class RunOptions(BaseModel):
    """Everything one pipeline pass needs, as supplied by the CLI."""

    template_path: Path | None = Field(
        default=None, description="Template file path (None reads STDIN)"
    )
    context_path: Path | None = Field(default=None, description="Explicit context file")
    targets: OutputTargets = Field(default_factory=OutputTargets)
    engine: EngineKind | None = Field(default=None, description="Forced engine")
    extension: str | None = Field(default=None, description="Extension hint")
    watch: float | None = Field(default=None, gt=0, description="Watch interval (s)")
    open_output: bool = False


class WatchState(BaseModel):
    """Scheduler-owned state that survives between watch cycles."""

    last_error: str | None = None
    has_completed_first_cycle: bool = False
