"""End-to-end tests for polyrender.runtime.pipeline."""

from __future__ import annotations

import pytest

from polyrender.core.errors import EngineUnrecognizedError, TemplateReadError
from polyrender.core.models import Engine, EngineKind, OutputTargets, RunOptions
from polyrender.rendering.io import default_output_path
from polyrender.runtime.pipeline import render_once


def test_handlebars_marker_end_to_end(tmp_path, write_json):
    template = tmp_path / "hello.html"
    template.write_text("<!--template handlebars-->Hello {{name}}", encoding="utf-8")
    write_json(tmp_path / "hello.ctx.json", {"name": "World"})
    output = default_output_path(template)

    outcome = render_once(
        RunOptions(template_path=template, targets=OutputTargets(path=output)),
        cwd=tmp_path,
    )

    assert outcome.rendered_text == "Hello World"
    assert output.name == "hello.rendered.html"
    assert output.read_text(encoding="utf-8") == "Hello World"


def test_unknown_marker_fails_naming_engine(tmp_path, write_json):
    template = tmp_path / "x.html"
    template.write_text("<!--template mustache-->Hello {{name}}", encoding="utf-8")
    write_json(tmp_path / "default.ctx.json", {"name": "World"})
    output = tmp_path / "out.html"

    with pytest.raises(EngineUnrecognizedError) as exc:
        render_once(
            RunOptions(template_path=template, targets=OutputTargets(path=output)),
            cwd=tmp_path,
        )
    assert exc.value.name == "mustache"
    assert not output.exists()


def test_plain_template_copied_verbatim(tmp_path, write_json):
    template = tmp_path / "static.html"
    body = "<p>{{ not rendered }}</p>\n"
    template.write_text(body, encoding="utf-8")
    write_json(tmp_path / "default.ctx.json", {})
    output = tmp_path / "static.rendered.html"

    render_once(
        RunOptions(template_path=template, targets=OutputTargets(path=output)),
        cwd=tmp_path,
    )
    assert output.read_text(encoding="utf-8") == body


def test_stdin_contents_with_cwd_context(tmp_path, write_json, capsys):
    write_json(tmp_path / "default.ctx.json", {"items": ["a", "b"]})
    options = RunOptions(targets=OutputTargets(stdout=True))

    render_once(
        options,
        stdin_contents="<!--template liquid-->{{ items | join: '+' }}",
        cwd=tmp_path,
    )
    assert capsys.readouterr().out == "a+b"


def test_forced_engine_and_extension_hint(tmp_path, write_json, capsys):
    template = tmp_path / "page.html"
    template.write_text("{{ x }}", encoding="utf-8")
    context = write_json(tmp_path / "explicit.json", {"x": "<i>"})
    options = RunOptions(
        template_path=template,
        context_path=context,
        targets=OutputTargets(stdout=True),
        engine=EngineKind.of(Engine.TERA),
        extension="txt",
    )

    render_once(options, cwd=tmp_path)
    assert capsys.readouterr().out == "<i>"


def test_missing_template_fails(tmp_path):
    options = RunOptions(template_path=tmp_path / "gone.tera")
    with pytest.raises(TemplateReadError):
        render_once(options, cwd=tmp_path)


def test_each_pass_rereads_files(tmp_path, write_json):
    template = tmp_path / "t.tera"
    template.write_text("v={{ v }}", encoding="utf-8")
    ctx = write_json(tmp_path / "t.ctx.json", {"v": 1})
    options = RunOptions(template_path=template, targets=OutputTargets())

    assert render_once(options, cwd=tmp_path).rendered_text == "v=1"
    write_json(ctx, {"v": 2})
    template.write_text("value={{ v }}", encoding="utf-8")
    assert render_once(options, cwd=tmp_path).rendered_text == "value=2"
