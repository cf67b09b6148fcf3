"""Post-generation cleanup of paths made obsolete by the answers.

Runs last, over the already materialised output directory.  Deleting a
path that does not exist is a no-op, so running the cleanup twice with the
same answers only deletes things the first time.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..definition import CleanupRule, values_equal
from ..errors import FileSystemError, RenderError
from .matching import stays_inside
from .renderer import RENDER_ERRORS, TemplateRenderer


def rule_applies(rule: CleanupRule, context: Mapping[str, Any]) -> bool:
    """Return ``True`` if *rule*'s trigger variable was answered with its value."""
    if rule.name not in context:
        return False
    return values_equal(context[rule.name], rule.value)


async def run_cleanup(
    output_dir: str | Path,
    rules: Iterable[CleanupRule],
    context: Mapping[str, Any],
    renderer: TemplateRenderer,
) -> list[Path]:
    """Apply every matching cleanup rule, in declaration order.

    Args:
        output_dir: Root of the generated tree.
        rules: Cleanup rules from the template definition.
        context: Collected answers.
        renderer: Renders the path templates of each rule.

    Returns:
        Output-relative paths that were actually removed.

    Raises:
        RenderError: A path template failed to render or escapes the output.
        FileSystemError: A deletion failed.
    """
    out = Path(output_dir)
    removed: list[Path] = []

    for rule in rules:
        if not rule_applies(rule, context):
            continue
        for path_template in rule.paths:
            try:
                rel = renderer.render_string(path_template, context)
            except RENDER_ERRORS as exc:
                raise RenderError(str(exc), rule=rule.name) from exc
            if os.path.normpath(rel.strip() or ".") == "." or not stays_inside(rel):
                raise RenderError(
                    f"path '{path_template}' renders to '{rel}', which does not name a "
                    "path inside the output directory",
                    rule=rule.name,
                )
            target = out / rel
            if await asyncio.to_thread(_remove, target):
                removed.append(Path(rel))

    return removed


def _remove(target: Path) -> bool:
    """Delete *target* recursively; return ``False`` if it did not exist."""
    try:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()
        else:
            return False
    except OSError as exc:
        raise FileSystemError(target, exc) from exc
    return True
