"""Normalization of user-supplied paths into absolute, canonical paths."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..core.errors import PathResolutionError

logger = logging.getLogger(__name__)


def normalize_separators(raw: str) -> str:
    """Rewrite the platform's alternate separator to its primary one."""
    if os.altsep:
        return raw.replace(os.altsep, os.sep)
    return raw


def resolve_path(raw: str, *, cwd: Path | None = None) -> Path:
    """Resolve a path string into an absolute, canonical path.

    Missing leaf components are tolerated: the result names where the file
    would live once created. Nothing is written to the filesystem.

    Args:
        raw: Path as typed by the user (relative or absolute)
        cwd: Base directory for relative paths (default: current directory)

    Returns:
        Absolute path, canonical where the filesystem allows it

    Raises:
        PathResolutionError: If the path is empty or names a filesystem root
    """
    if not raw or not raw.strip():
        raise PathResolutionError("empty path")

    path = Path(normalize_separators(raw)).expanduser()
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path

    try:
        resolved = path.resolve(strict=False)
    except (OSError, RuntimeError) as e:
        # e.g. a symlink loop; callers work with the uncanonicalized path
        logger.debug(f"Could not canonicalize {path}: {e}")
        resolved = Path(os.path.normpath(path))

    if resolved == Path(resolved.anchor):
        raise PathResolutionError("path resolves to a filesystem root", path=resolved)

    logger.debug(f"Resolved {raw!r} → {resolved}")
    return resolved
