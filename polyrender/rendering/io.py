"""File and stream I/O around a render pass."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import typer

from ..core.errors import OutputWriteError, TemplateReadError
from ..core.models import OutputTargets, RenderOutcome, TemplateSource
from ..settings import Settings, get_settings

logger = logging.getLogger(__name__)


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write text to a file atomically using a temporary file.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal)
    """
    ensure_parent(path)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
        os.chmod(path, mode)
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError as e:
                logger.warning(f"Could not remove temporary file {tmp_name}: {e}")


def read_template(path: Path) -> TemplateSource:
    """Load a template file.

    Raises:
        TemplateReadError: If the file is missing, unreadable or not UTF-8
    """
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateReadError(f"cannot read template: {e}", path=path) from e
    return TemplateSource(contents=contents, origin=path)


def default_output_path(template_path: Path, settings: Settings | None = None) -> Path:
    """Output path beside the template: ``<stem>.rendered.<ext>``."""
    settings = settings or get_settings()
    name = f"{template_path.stem}.{settings.rendered_infix}{template_path.suffix}"
    return template_path.with_name(name)


def emit(outcome: RenderOutcome, targets: OutputTargets) -> None:
    """Send rendered text to every configured target.

    Raises:
        OutputWriteError: If the output file cannot be written
    """
    text = outcome.rendered_text

    if targets.path is not None:
        try:
            atomic_write_text(targets.path, text, mode=targets.file_mode)
        except OSError as e:
            raise OutputWriteError(f"cannot write output: {e}", path=targets.path) from e
        logger.info(f"Rendered → {targets.path}")

    if targets.stdout:
        typer.echo(text, nl=False)
    if targets.stderr:
        typer.echo(text, nl=False, err=True)
