"""Polyrender - multi-engine template renderer.

Renders a template file (or STDIN) against a JSON context using Tera-style
(Jinja2), Handlebars or Liquid, optionally re-rendering on a fixed interval.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]
