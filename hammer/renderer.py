"""
renderer.py

Responsibility: Render package template strings.

Rules:
- Templates are Jinja2 strings rendered against a read-only mapping.
- Undefined names are errors, not empty strings.
- Rendering never touches the filesystem and never mutates the context.

This module intentionally does NOT know about packages, resources or fpm.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import Environment, StrictUndefined


class RenderError(RuntimeError):
    pass


# Comments use `{{#`/`#}}` so shell syntax like `${#var}` passes through.
_env = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    comment_start_string="{{#",
    comment_end_string="#}}",
)


def render(template: str, context: Mapping[str, Any]) -> str:
    """
    Render `template` with the names in `context`.

    Plain strings without Jinja2 markers come back unchanged.
    """
    if ("{{" not in template) and ("{%" not in template):
        return template
    try:
        return _env.from_string(template).render(**context)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(f"Failed rendering template {template!r}: {e}") from e
