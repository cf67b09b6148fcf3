"""Template source acquisition.

A template is given either as a local directory or as a git remote.
Remotes are cloned into a fresh temporary directory with the ``git`` CLI.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import SourceAcquisitionError


_REMOTE_PREFIXES: tuple[str, ...] = (
    "http://",
    "https://",
    "git://",
    "ssh://",
    "file://",
    "git@",
)


class SourceKind(str, Enum):
    """Where a template comes from."""

    LOCAL = "local"
    GIT = "git"


@dataclass(frozen=True)
class Source:
    """A parsed template source argument."""

    kind: SourceKind
    location: str


def get_source(value: str) -> Source:
    """Classify *value* as a local path or a git remote.

    An existing local path always wins, so a directory literally named
    ``git@host`` is still used as-is.
    """
    if Path(value).exists():
        return Source(SourceKind.LOCAL, value)
    if value.startswith(_REMOTE_PREFIXES) or value.endswith(".git"):
        return Source(SourceKind.GIT, value)
    return Source(SourceKind.LOCAL, value)


def _repository_name(remote: str) -> str:
    name = remote.rstrip("/").split("/")[-1].split(":")[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name or "template"


async def _run_git(
    *args: str,
    source: str = "",
    cwd: str | Path | None = None,
    timeout: float = 300.0,
) -> tuple[str, str]:
    """Run a git command asynchronously and return (stdout, stderr).

    Raises SourceAcquisitionError if git is missing, times out or exits with
    a non-zero code.  *source* names the template in the error.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)
    source = source or cmd_str

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError as exc:
        raise SourceAcquisitionError(source, "git is not installed") from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise SourceAcquisitionError(
            source,
            f"git command timed out after {timeout}s: {cmd_str}",
        )

    stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr = stderr_bytes.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise SourceAcquisitionError(
            source,
            f"git command failed (exit {process.returncode}): {cmd_str}\n{stderr}",
            stderr=stderr,
        )

    return stdout, stderr


async def clone_repository(
    remote: str,
    parent_dir: str | Path | None = None,
    timeout: float = 300.0,
) -> Path:
    """Clone *remote* into a new temporary directory under *parent_dir*.

    Returns:
        Path to the working tree of the clone.

    Raises:
        SourceAcquisitionError: If the clone fails.
    """
    parent = Path(parent_dir) if parent_dir is not None else Path(tempfile.gettempdir())
    try:
        parent.mkdir(parents=True, exist_ok=True)
        workdir = Path(tempfile.mkdtemp(prefix="stencil-", dir=parent))
    except OSError as exc:
        raise SourceAcquisitionError(remote, f"cannot create clone directory: {exc}") from exc

    target = workdir / _repository_name(remote)
    try:
        await _run_git("clone", "--quiet", remote, str(target), source=remote, timeout=timeout)
    except SourceAcquisitionError:
        shutil.rmtree(workdir, ignore_errors=True)
        raise
    return target


def local_template_dir(path: str) -> Path:
    """Validate a local template path.

    Raises:
        SourceAcquisitionError: If *path* is not an existing directory.
    """
    template_dir = Path(path).expanduser()
    if not template_dir.is_dir():
        raise SourceAcquisitionError(path, "not an existing directory")
    return template_dir
