"""Render walker: materialises a template tree into an output directory.

The template root is walked depth-first in sorted order.  Every directory
is created before anything beneath it is visited, so file writes never race
a missing parent.  Each file is either copied byte-for-byte (binary content
or a ``copy_without_render`` match) or decoded, rendered and written.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..config import DEFAULT_VCS_DIRS, IgnoreMatch
from ..errors import BinaryDecodeError, FileSystemError, RenderError
from ..utils import ensure_dir, looks_binary
from .matching import PatternSet, is_ignored, is_vcs_dir, stays_inside
from .renderer import RENDER_ERRORS, TemplateRenderer


@dataclass
class WalkResult:
    """What a walk produced, as output-relative paths (ignored ones are template-relative)."""

    output_dir: Path
    directories: list[Path] = field(default_factory=list)
    rendered: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)
    ignored: list[Path] = field(default_factory=list)

    @property
    def files(self) -> list[Path]:
        """Every file written, rendered or copied."""
        return sorted(self.rendered + self.copied)


class RenderWalker:
    """Walks a template tree and writes the rendered copy of it.

    Args:
        renderer: Renders relative paths and file contents.
        ignore: Template-relative paths that are left out, with everything
            beneath them.
        copy_without_render: Globs of output-relative paths copied verbatim.
        ignore_match: How ``ignore`` entries are matched.
        vcs_dirs: Directory names that are never walked into.
        binary_check: Decides whether file content is binary.
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        *,
        ignore: Iterable[str] = (),
        copy_without_render: Iterable[str] = (),
        ignore_match: IgnoreMatch = IgnoreMatch.COMPONENT,
        vcs_dirs: Iterable[str] = DEFAULT_VCS_DIRS,
        binary_check: Callable[[bytes], bool] = looks_binary,
    ) -> None:
        self.renderer = renderer
        self.ignore = tuple(ignore)
        self.patterns = PatternSet(copy_without_render)
        self.ignore_match = IgnoreMatch(ignore_match)
        self.vcs_dirs = frozenset(vcs_dirs)
        self.binary_check = binary_check

    # -- Public API --------------------------------------------------------

    async def walk(
        self,
        template_dir: str | Path,
        output_dir: str | Path,
        context: Mapping[str, Any],
        definition_path: str | Path | None = None,
    ) -> WalkResult:
        """Render the tree under *template_dir* into *output_dir*.

        Args:
            template_dir: Root of the template tree.  Never emitted itself.
            output_dir: Destination root, created if absent.
            context: Collected answers.
            definition_path: The definition file, which is never emitted.

        Returns:
            A ``WalkResult`` describing every entry written or ignored.

        Raises:
            RenderError: A path or file content failed to render.
            BinaryDecodeError: Non-binary content was not valid UTF-8.
            FileSystemError: Any read, write, copy or mkdir failure.
        """
        root = Path(template_dir)
        out = Path(output_dir)
        definition_rel = _relative_or_none(definition_path, root)

        out_resolved = await asyncio.to_thread(_make_output_root, out)
        result = WalkResult(output_dir=out)

        for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=_raise_walk_error):
            current = Path(dirpath)
            dirnames.sort()
            filenames.sort()

            descend: list[str] = []
            for name in dirnames:
                if is_vcs_dir(name, self.vcs_dirs):
                    continue
                # An output directory nested in the template is never walked into.
                if (current / name).resolve() == out_resolved:
                    continue
                rel = (current / name).relative_to(root).as_posix()
                if is_ignored(rel, self.ignore, self.ignore_match):
                    result.ignored.append(Path(rel))
                    continue
                dest_rel = self._render_path(rel, context)
                await asyncio.to_thread(_make_dir, out / dest_rel)
                result.directories.append(Path(dest_rel))
                descend.append(name)
            # Pruning in place stops os.walk from entering skipped directories.
            dirnames[:] = descend

            for name in filenames:
                rel = (current / name).relative_to(root).as_posix()
                if rel == definition_rel:
                    continue
                if is_ignored(rel, self.ignore, self.ignore_match):
                    result.ignored.append(Path(rel))
                    continue
                await self._process_file(current / name, rel, out, context, result)

        return result

    # -- Per-entry handling ------------------------------------------------

    def _render_path(self, rel: str, context: Mapping[str, Any]) -> str:
        """Render a template-relative path into an output-relative one."""
        try:
            rendered = self.renderer.render_string(rel, context)
        except RENDER_ERRORS as exc:
            raise RenderError(str(exc), path=rel) from exc
        if not stays_inside(rendered):
            raise RenderError(
                f"renders to '{rendered}', which is outside the output directory",
                path=rel,
            )
        return rendered

    async def _process_file(
        self,
        source: Path,
        rel: str,
        out: Path,
        context: Mapping[str, Any],
        result: WalkResult,
    ) -> None:
        dest_rel = self._render_path(rel, context)
        dest = out / dest_rel

        try:
            buffer = await asyncio.to_thread(source.read_bytes)
        except OSError as exc:
            raise FileSystemError(source, exc) from exc

        if self.patterns.matches(dest_rel) or self.binary_check(buffer):
            try:
                await asyncio.to_thread(shutil.copy2, source, dest)
            except OSError as exc:
                raise FileSystemError(dest, exc) from exc
            result.copied.append(Path(dest_rel))
            return

        try:
            text = buffer.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BinaryDecodeError(rel, str(exc)) from exc

        try:
            contents = self.renderer.render_string(text, context)
        except RENDER_ERRORS as exc:
            raise RenderError(str(exc), path=rel) from exc

        await asyncio.to_thread(_write_file, source, dest, contents)
        result.rendered.append(Path(dest_rel))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _make_output_root(path: Path) -> Path:
    try:
        return ensure_dir(path)
    except OSError as exc:
        raise FileSystemError(path, exc) from exc


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(path, exc) from exc


def _write_file(source: Path, dest: Path, contents: str) -> None:
    """Write rendered text, keeping the template file's permission bits."""
    try:
        dest.write_bytes(contents.encode("utf-8"))
        shutil.copymode(source, dest)
    except OSError as exc:
        raise FileSystemError(dest, exc) from exc


def _raise_walk_error(error: OSError) -> None:
    raise FileSystemError(error.filename or "", error) from error


def _relative_or_none(path: str | Path | None, root: Path) -> str | None:
    if path is None:
        return None
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return None

