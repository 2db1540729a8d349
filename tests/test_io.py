"""Tests for polyrender.rendering.io."""

from __future__ import annotations

import os
import stat

import pytest

from polyrender.core.errors import OutputWriteError, TemplateReadError
from polyrender.core.models import OutputTargets, RenderOutcome
from polyrender.rendering.io import (
    atomic_write_text,
    default_output_path,
    emit,
    read_template,
)
from polyrender.settings import Settings


def test_atomic_write_creates_parents_and_sets_mode(tmp_path):
    target = tmp_path / "deep" / "out.txt"
    atomic_write_text(target, "data\r\n", mode=0o600)
    assert target.read_bytes() == b"data\r\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    assert [p.name for p in target.parent.iterdir()] == ["out.txt"]


def test_read_template_records_origin(tmp_path):
    f = tmp_path / "page.hbs"
    f.write_text("{{x}}", encoding="utf-8")
    source = read_template(f)
    assert source.contents == "{{x}}"
    assert source.origin == f
    assert source.extension == "hbs"


def test_read_missing_template_fails(tmp_path):
    with pytest.raises(TemplateReadError) as exc:
        read_template(tmp_path / "none.tera")
    assert exc.value.path == tmp_path / "none.tera"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("page.html", "page.rendered.html"),
        ("mail.txt.liq", "mail.txt.rendered.liq"),
        ("README", "README.rendered"),
    ],
)
def test_default_output_path(tmp_path, name, expected):
    assert default_output_path(tmp_path / name) == tmp_path / expected


def test_default_output_path_uses_settings(tmp_path):
    settings = Settings(rendered_infix="out")
    assert default_output_path(tmp_path / "a.html", settings) == tmp_path / "a.out.html"


def test_emit_to_streams(capsys):
    emit(RenderOutcome(rendered_text="hi"), OutputTargets(stdout=True, stderr=True))
    captured = capsys.readouterr()
    assert captured.out == "hi"
    assert captured.err == "hi"


def test_emit_to_file(tmp_path, capsys):
    target = tmp_path / "out.html"
    emit(RenderOutcome(rendered_text="<p>"), OutputTargets(path=target))
    assert target.read_text(encoding="utf-8") == "<p>"
    assert capsys.readouterr().out == ""


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions")
def test_emit_write_failure(tmp_path):
    locked = tmp_path / "locked"
    locked.mkdir()
    locked.chmod(0o500)
    try:
        with pytest.raises(OutputWriteError) as exc:
            emit(RenderOutcome(rendered_text="x"), OutputTargets(path=locked / "out.txt"))
        assert exc.value.stage == "writing output"
    finally:
        locked.chmod(0o700)


def test_emit_to_directory_path_fails(tmp_path):
    with pytest.raises(OutputWriteError):
        emit(RenderOutcome(rendered_text="x"), OutputTargets(path=tmp_path))
