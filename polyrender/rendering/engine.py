"""Template rendering engines.

Every engine failure is re-raised as one of the pipeline errors, labelled
with the stage that failed, so callers never handle engine-specific
exception types.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateSyntaxError,
    select_autoescape,
)
from liquid import Environment as LiquidEnvironment
from liquid import StrictUndefined as LiquidStrictUndefined
from liquid.exceptions import LiquidError
from pybars import Compiler, PybarsError

from ..core.errors import (
    EngineUnrecognizedError,
    ParserBuildError,
    RenderError,
    TemplateParseError,
)
from ..core.models import ContextDocument, Engine, EngineKind, RenderOutcome
from ..settings import Settings, get_settings

logger = logging.getLogger(__name__)

ROOT_TEMPLATE = "__polyrender_root__"
REJECTING_CONTEXT = "rejecting context"

# Errors raised from inside templates (bad arithmetic, filters, self-inclusion)
_EXPRESSION_ERRORS = (
    ArithmeticError,
    LookupError,
    RecursionError,
    TypeError,
    ValueError,
)


def effective_extension(
    extension_hint: str | None,
    template_path: Path | None,
    settings: Settings | None = None,
) -> str:
    """Extension the root template is registered under.

    The explicit hint wins, then the template's own extension, then the
    configured default.
    """
    if extension_hint:
        return extension_hint.lstrip(".")
    if template_path is not None and template_path.suffix:
        return template_path.suffix[1:]
    return (settings or get_settings()).default_extension


def _require_mapping(context: ContextDocument, engine: Engine) -> dict[str, Any]:
    if not isinstance(context.value, dict):
        raise RenderError(
            f"{engine.value} needs a JSON object as context, "
            f"got {type(context.value).__name__}",
            path=context.source_path,
            stage=REJECTING_CONTEXT,
        )
    return context.value


def load_tera_template(
    contents: str,
    extension: str,
    template_path: Path | None = None,
    settings: Settings | None = None,
) -> Template:
    """Compile ``contents`` as the root of a Jinja2 environment.

    Sibling files in the template's directory are reachable by name from
    ``include``, ``extends`` and ``import``. The root is registered as
    ``ROOT_TEMPLATE.<extension>`` so auto-escaping follows the extension.
    """
    settings = settings or get_settings()
    root_name = f"{ROOT_TEMPLATE}.{extension}"

    loaders: list[Any] = [DictLoader({root_name: contents})]
    if template_path is not None:
        loaders.append(FileSystemLoader(str(template_path.parent)))

    env = Environment(
        loader=ChoiceLoader(loaders),
        undefined=StrictUndefined,
        autoescape=select_autoescape(
            enabled_extensions=tuple(settings.autoescape_extensions),
            disabled_extensions=(),
            default_for_string=False,
            default=False,
        ),
        keep_trailing_newline=True,
    )

    try:
        return env.get_template(root_name)
    except TemplateSyntaxError as e:
        raise TemplateParseError(
            f"line {e.lineno}: {e.message}", path=template_path
        ) from e


def render_tera(
    contents: str,
    context: ContextDocument,
    extension: str,
    template_path: Path | None = None,
    settings: Settings | None = None,
) -> str:
    template = load_tera_template(contents, extension, template_path, settings)
    variables = _require_mapping(context, Engine.TERA)
    try:
        return template.render(variables)
    except (TemplateError, *_EXPRESSION_ERRORS) as e:
        raise RenderError(str(e), path=template_path) from e


def render_handlebars(
    contents: str, context: ContextDocument, template_path: Path | None = None
) -> str:
    try:
        compiled = Compiler().compile(contents)
    except PybarsError as e:
        raise TemplateParseError(str(e), path=template_path) from e

    try:
        return str(compiled(context.value))
    except (PybarsError, *_EXPRESSION_ERRORS) as e:
        raise RenderError(str(e), path=template_path) from e


def render_liquid(
    contents: str, context: ContextDocument, template_path: Path | None = None
) -> str:
    try:
        env = LiquidEnvironment(undefined=LiquidStrictUndefined)
    except LiquidError as e:
        raise ParserBuildError(str(e), path=template_path) from e

    try:
        template = env.from_string(contents)
    except LiquidError as e:
        raise TemplateParseError(str(e), path=template_path) from e

    variables = _require_mapping(context, Engine.LIQUID)
    try:
        return template.render(variables)
    except (LiquidError, *_EXPRESSION_ERRORS) as e:
        raise RenderError(str(e), path=template_path) from e


def render(
    contents: str,
    context: ContextDocument,
    kind: EngineKind,
    extension_hint: str | None = None,
    *,
    template_path: Path | None = None,
    settings: Settings | None = None,
) -> RenderOutcome:
    """Render ``contents`` with the engine described by ``kind``.

    Args:
        contents: Template body (magic comment already stripped)
        context: Parsed JSON context
        kind: Engine to use
        extension_hint: Extension controlling Jinja2 auto-escaping
        template_path: Template file, used for sibling lookups and messages
        settings: Engine configuration

    Returns:
        Rendered text; ``Engine.NONE`` returns ``contents`` unchanged

    Raises:
        EngineUnrecognizedError: For ``Engine.UNRECOGNIZED``; no engine runs
        ParserBuildError, TemplateParseError, RenderError: From the engine
    """
    engine = kind.engine
    if engine is Engine.UNRECOGNIZED:
        raise EngineUnrecognizedError(kind.name or "", path=template_path)

    if engine is Engine.NONE:
        return RenderOutcome(rendered_text=contents)

    logger.debug(f"Rendering with {engine.value}")
    if engine is Engine.TERA:
        extension = effective_extension(extension_hint, template_path, settings)
        text = render_tera(contents, context, extension, template_path, settings)
    elif engine is Engine.HANDLEBARS:
        text = render_handlebars(contents, context, template_path)
    else:
        text = render_liquid(contents, context, template_path)

    return RenderOutcome(rendered_text=text)
