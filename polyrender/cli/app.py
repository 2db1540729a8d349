"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..core.errors import PolyrenderError
from ..core.models import OutputTargets, RunOptions
from ..rendering import io
from ..runtime.pipeline import render_once
from ..runtime.scheduler import WatchScheduler
from ..settings import get_settings
from .parsers import parse_engine, parse_extension, parse_file_mode, parse_path

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="polyrender",
    help="Render Tera, Handlebars or Liquid templates against a JSON context.",
)

STDIN_MARKER = "-"


def _open_output(path: Path | None) -> None:
    if path is None:
        logger.warning("Nothing to open: output is not written to a file")
        return
    logger.debug(f"Opening {path}")
    typer.launch(str(path))


@app.command()
def render(
    template: Annotated[
        str,
        typer.Argument(
            help="Template file. Omit or pass '-' to read the template from STDIN.",
            metavar="TEMPLATE",
        ),
    ] = "",
    context: Annotated[
        str,
        typer.Option(
            "--context",
            "-c",
            help="JSON context file (default: <stem>.ctx.json or default.ctx.json).",
            metavar="PATH",
        ),
    ] = "",
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "-o",
            help="Output file (default: <stem>.rendered.<ext> beside the template).",
            metavar="PATH",
        ),
    ] = "",
    stdout: Annotated[
        bool,
        typer.Option("--stdout", help="Write the rendered text to STDOUT."),
    ] = False,
    stderr: Annotated[
        bool,
        typer.Option("--stderr", help="Write the rendered text to STDERR."),
    ] = False,
    engine_name: Annotated[
        str,
        typer.Option(
            "--engine",
            "-e",
            help="Force an engine: tera, liquid, liq, handlebars, hbs or none.",
            metavar="NAME",
        ),
    ] = "",
    extension: Annotated[
        str,
        typer.Option(
            "--extension",
            "-x",
            help="Extension hint controlling auto-escaping (e.g. html, txt).",
            metavar="EXT",
        ),
    ] = "",
    watch: Annotated[
        float | None,
        typer.Option(
            "--watch",
            "-w",
            help="Re-render every SECONDS until interrupted.",
            metavar="SECONDS",
            min=0.001,
        ),
    ] = None,
    open_output: Annotated[
        bool,
        typer.Option("--open", help="Open the output file once it is first rendered."),
    ] = False,
    file_mode: Annotated[
        str,
        typer.Option(
            "--mode",
            help="Output file permissions in octal (default: 0644).",
            metavar="OCTAL",
        ),
    ] = "",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Render a template against a JSON context."""
    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    logger.debug("Starting polyrender")
    settings = get_settings()

    # Parse configuration
    template_path = None if template == STDIN_MARKER else parse_path(template)
    output_path = parse_path(output)
    if output_path is None and template_path is not None and not (stdout or stderr):
        output_path = io.default_output_path(template_path, settings)
    if template_path is None and output_path is None and not stderr:
        stdout = True

    options = RunOptions(
        template_path=template_path,
        context_path=parse_path(context),
        targets=OutputTargets(
            path=output_path,
            stdout=stdout,
            stderr=stderr,
            file_mode=parse_file_mode(file_mode) if file_mode else settings.file_mode,
        ),
        engine=parse_engine(engine_name),
        extension=parse_extension(extension),
        watch=watch,
        open_output=open_output,
    )

    stdin_contents = None
    if options.template_path is None:
        logger.debug("Reading template from STDIN")
        stdin_contents = typer.get_text_stream("stdin").read()

    scheduler = WatchScheduler(
        lambda: render_once(options, stdin_contents=stdin_contents, settings=settings),
        options.watch,
        on_first_success=(
            (lambda: _open_output(options.targets.path)) if options.open_output else None
        ),
    )

    try:
        scheduler.run()
    except PolyrenderError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        logger.info("Watch stopped")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
