"""stencil configuration.

Typed generator settings. Every field has a sensible default so a bare
``GeneratorConfig()`` works; ``from_env`` layers ``STENCIL_*`` environment
variables on top, and the CLI overrides individual fields from its flags.
"""

from __future__ import annotations

import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


DEFAULT_VCS_DIRS: list[str] = [".git", ".hg", ".svn", ".bzr"]


class IgnoreMatch(str, Enum):
    """How entries of a definition's ``ignore`` list are matched."""

    COMPONENT = "component"
    PREFIX = "prefix"


class GeneratorConfig(BaseModel):
    """Settings shared by the source resolver, walker and CLI."""

    definition_file: str = Field(
        default="template.toml",
        description="Name of the definition file at the template root",
    )
    vcs_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VCS_DIRS),
        description="Directory names never walked into",
    )
    ignore_match: IgnoreMatch = Field(
        default=IgnoreMatch.COMPONENT,
        description="'component' matches whole path segments, 'prefix' raw string prefixes",
    )
    clone_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()),
        description="Parent directory for cloned remote templates",
    )
    git_timeout: int = Field(default=300, ge=1, description="git clone timeout in seconds")
    binary_sample_size: int = Field(
        default=8000, ge=1, description="Leading bytes inspected by binary detection"
    )

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            STENCIL_DEFINITION_FILE, STENCIL_VCS_DIRS, STENCIL_IGNORE_MATCH,
            STENCIL_CLONE_DIR, STENCIL_GIT_TIMEOUT, STENCIL_BINARY_SAMPLE_SIZE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STENCIL_DEFINITION_FILE"):
            kwargs["definition_file"] = os.environ["STENCIL_DEFINITION_FILE"]
        if os.environ.get("STENCIL_VCS_DIRS"):
            kwargs["vcs_dirs"] = [
                d.strip() for d in os.environ["STENCIL_VCS_DIRS"].split(",") if d.strip()
            ]
        if os.environ.get("STENCIL_IGNORE_MATCH"):
            kwargs["ignore_match"] = os.environ["STENCIL_IGNORE_MATCH"]
        if os.environ.get("STENCIL_CLONE_DIR"):
            kwargs["clone_dir"] = Path(os.environ["STENCIL_CLONE_DIR"])
        if os.environ.get("STENCIL_GIT_TIMEOUT"):
            kwargs["git_timeout"] = int(os.environ["STENCIL_GIT_TIMEOUT"])
        if os.environ.get("STENCIL_BINARY_SAMPLE_SIZE"):
            kwargs["binary_sample_size"] = int(os.environ["STENCIL_BINARY_SAMPLE_SIZE"])
        return cls(**kwargs)
