"""stencil generator -- renders a template tree into a project.

This package holds the generation engine: answer resolution, the render
walker, the cleanup pass and the matching helpers they share, tied together
by :class:`Template`.

Quick usage::

    from stencil.generator import Template
    from stencil.prompt import ConsolePrompter

    template = Template("/path/to/template")
    result = await template.generate("/tmp/output", ConsolePrompter())
"""

from stencil.generator.answers import resolve_answers
from stencil.generator.cleanup import run_cleanup
from stencil.generator.matching import PatternSet, is_ignored
from stencil.generator.renderer import TemplateRenderer
from stencil.generator.template import GenerationResult, Template
from stencil.generator.walker import RenderWalker, WalkResult

__all__ = [
    "GenerationResult",
    "PatternSet",
    "RenderWalker",
    "Template",
    "TemplateRenderer",
    "WalkResult",
    "is_ignored",
    "resolve_answers",
    "run_cleanup",
]
