"""Error taxonomy for stencil.

Every failure the generator can report derives from :class:`StencilError`
and carries a short ``kind`` label that the CLI prints alongside the message.
Errors always abort the run; nothing is retried.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence


class StencilError(Exception):
    """Base class for every error raised by stencil."""

    kind: str = "StencilError"


class MissingDefinitionError(StencilError):
    """Raised when the template has no definition file."""

    kind = "MissingDefinition"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Template definition not found: {self.path}")


class InvalidDefinitionError(StencilError):
    """Raised when the definition file cannot be parsed or fails validation."""

    kind = "InvalidDefinition"

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class UnsupportedVariableTypeError(StencilError):
    """Raised when a variable's default is not a bool, string or integer."""

    kind = "UnsupportedVariableType"

    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value
        super().__init__(
            f"Variable '{name}' has an unsupported default of type "
            f"{type(value).__name__}: {value!r}"
        )


class InvalidAnswerError(StencilError):
    """Raised when a prompter returns an answer outside a variable's choices."""

    kind = "InvalidAnswer"

    def __init__(self, name: str, answer: Any, choices: Sequence[Any]) -> None:
        self.name = name
        self.answer = answer
        self.choices = list(choices)
        super().__init__(
            f"Answer {answer!r} for '{name}' is not one of {self.choices!r}"
        )


class RenderError(StencilError):
    """Raised when the template engine rejects a path or content template.

    ``path`` is the template-relative path of the offending entry, or ``None``
    for cleanup path templates, in which case ``rule`` names the cleanup rule.
    """

    kind = "RenderError"

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        rule: str | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.rule = rule
        if self.path is not None:
            prefix = f"Failed to render {self.path.as_posix()}"
        elif rule is not None:
            prefix = f"Failed to render cleanup path of rule '{rule}'"
        else:
            prefix = "Failed to render template"
        super().__init__(f"{prefix}: {message}")


class BinaryDecodeError(StencilError):
    """Raised when content sent to the renderer is not valid UTF-8 text."""

    kind = "BinaryDecodeError"

    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = Path(path)
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f"{self.path.as_posix()} is not valid UTF-8 text and was not "
            f"detected as binary{detail}"
        )


class FileSystemError(StencilError):
    """Raised when a filesystem operation fails; carries the offending path."""

    kind = "IoError"

    def __init__(self, path: str | Path, error: OSError) -> None:
        self.path = Path(path)
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"{reason}: {self.path}")


class SourceAcquisitionError(StencilError):
    """Raised when the template source cannot be obtained."""

    kind = "SourceAcquisitionError"

    def __init__(self, source: str, message: str, stderr: str = "") -> None:
        self.source = source
        self.stderr = stderr
        super().__init__(f"Could not obtain template from {source}: {message}")
