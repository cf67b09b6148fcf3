"""Jinja2 template rendering for project generation.

Provides the TemplateRenderer class which renders inline template strings
(file contents, relative paths and cleanup paths) against the collected
answer context.  Undefined variables are errors: a typo in a template must
fail the generation rather than silently render an empty string.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from jinja2 import Environment, StrictUndefined, TemplateError

# Everything a template can raise while rendering: engine errors plus the
# runtime errors of expressions and filters (``{{ 1 / 0 }}``, ``{{ 3 | slugify }}``).
RENDER_ERRORS: tuple[type[Exception], ...] = (
    TemplateError,
    ArithmeticError,
    AttributeError,
    LookupError,
    TypeError,
    ValueError,
)

# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 template strings with a variable context.

    The environment never autoescapes (generated files are source code, not
    HTML) and keeps trailing newlines so rendered files end the way their
    templates do.
    """

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    def render_string(self, template_string: str, context: Mapping[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Raises:
            jinja2.TemplateError: On invalid syntax or an undefined variable.
        """
        template = self.env.from_string(template_string)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
