"""Generation orchestrator.

Ties the three phases together for one template::

    template = await Template.from_input("gh-user/repo.git")
    result = await template.generate("./my-project", ConsolePrompter())

1. Answers: every question is resolved before anything is written.
2. Walk: the template tree is rendered into the output directory.
3. Cleanup: paths made obsolete by the answers are deleted.

A failure in any phase aborts the run and leaves whatever was already
written in place; stencil never rolls back a partial output tree.
"""

from __future__ import annotations

import functools
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

from ..config import GeneratorConfig
from ..definition import TemplateDefinition, load_definition
from ..errors import SourceAcquisitionError
from ..prompt import DefaultsPrompter, Prompter
from ..source import SourceKind, clone_repository, get_source, local_template_dir
from ..utils import looks_binary, print_info, print_success
from .answers import resolve_answers
from .cleanup import run_cleanup
from .renderer import TemplateRenderer
from .walker import RenderWalker, WalkResult


@dataclass
class GenerationResult:
    """Everything a successful generation produced."""

    output_dir: Path
    context: Mapping[str, Any]
    walk: WalkResult
    removed: list[Path] = field(default_factory=list)

    @property
    def files(self) -> list[Path]:
        """Output-relative files still present after cleanup."""
        return [
            f for f in self.walk.files
            if not any(f == r or r in f.parents for r in self.removed)
        ]


class Template:
    """A template tree on the local filesystem, ready to be generated.

    Attributes:
        path: Directory holding the template tree and its definition file.
        config: Generator settings.
    """

    def __init__(
        self,
        path: str | Path,
        config: GeneratorConfig | None = None,
        *,
        clone_root: Path | None = None,
    ) -> None:
        self.path = Path(path)
        self.config = config or GeneratorConfig()
        self.renderer = TemplateRenderer()
        self._clone_root = clone_root
        self._definition: Optional[TemplateDefinition] = None

    # -- Construction ------------------------------------------------------

    @classmethod
    async def from_input(
        cls,
        value: str,
        config: GeneratorConfig | None = None,
        directory: str | None = None,
    ) -> "Template":
        """Create a template from a local path or a git remote.

        Args:
            value: Local directory or git remote URL.
            config: Generator settings.
            directory: Optional sub-directory of the source holding the
                template.

        Raises:
            SourceAcquisitionError: The path is missing or the clone failed.
        """
        config = config or GeneratorConfig()
        source = get_source(value)

        clone_root: Path | None = None
        if source.kind is SourceKind.GIT:
            print_info("Cloning the repository into a temporary folder...")
            root = await clone_repository(
                source.location, config.clone_dir, timeout=config.git_timeout
            )
            clone_root = root.parent
        else:
            root = local_template_dir(source.location)

        if directory:
            if not (root / directory).is_dir():
                if clone_root is not None:
                    shutil.rmtree(clone_root, ignore_errors=True)
                raise SourceAcquisitionError(
                    value, f"no directory '{directory}' in the template source"
                )
            root = root / directory

        return cls(root, config, clone_root=clone_root)

    def close(self) -> None:
        """Remove the temporary clone of a remote template, if any."""
        if self._clone_root is not None:
            shutil.rmtree(self._clone_root, ignore_errors=True)
            self._clone_root = None

    # -- Definition --------------------------------------------------------

    @property
    def definition_path(self) -> Path:
        return self.path / self.config.definition_file

    def load_definition(self) -> TemplateDefinition:
        """Load (once) the template's definition file.

        Raises:
            MissingDefinitionError: No definition file at the template root.
            InvalidDefinitionError: The file fails to parse or validate.
        """
        if self._definition is None:
            self._definition = load_definition(self.definition_path)
        return self._definition

    def ask_questions(
        self, prompter: Prompter, definition: TemplateDefinition | None = None
    ) -> dict[str, Any]:
        """Resolve the answers for this template's variables."""
        return resolve_answers(definition or self.load_definition(), prompter)

    # -- Generation --------------------------------------------------------

    async def generate(
        self,
        output_dir: str | Path,
        prompter: Prompter | None = None,
        *,
        binary_check: Callable[[bytes], bool] | None = None,
    ) -> GenerationResult:
        """Generate the project into *output_dir*.

        Args:
            output_dir: Destination directory, created if absent.  Existing
                files in it are overwritten.
            prompter: Answers the questions; defaults to accepting every
                default.
            binary_check: Overrides binary content detection.

        Returns:
            A ``GenerationResult`` with the context and written paths.
        """
        definition = self.load_definition()
        context = MappingProxyType(self.ask_questions(prompter or DefaultsPrompter(), definition))

        if binary_check is None:
            binary_check = functools.partial(
                looks_binary, sample_size=self.config.binary_sample_size
            )

        walker = RenderWalker(
            self.renderer,
            ignore=definition.ignore,
            copy_without_render=definition.copy_without_render,
            ignore_match=self.config.ignore_match,
            vcs_dirs=self.config.vcs_dirs,
            binary_check=binary_check,
        )
        out = Path(output_dir)
        walk = await walker.walk(self.path, out, context, self.definition_path)
        removed = await run_cleanup(out, definition.cleanup, context, self.renderer)

        print_success("Everything done, ready to go!")
        return GenerationResult(output_dir=out, context=context, walk=walk, removed=removed)
