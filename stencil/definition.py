"""Pydantic v2 models for template definitions.

A template definition (``template.toml`` at the template root) declares the
questions to ask, the paths to leave out of the output, the globs to copy
without rendering and the cleanup rules to apply once the tree exists.
Models are frozen: a definition is read once and never changes during a run.
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from .errors import InvalidDefinitionError, MissingDefinitionError


# Strict members keep TOML's own tags: ``true`` stays a bool and ``"1"`` stays
# a string.
Value = Union[StrictBool, StrictInt, StrictStr]

SUPPORTED_TYPES: tuple[type, ...] = (bool, str, int)


def value_tag(value: Any) -> Optional[type]:
    """Return the supported tag (``bool``, ``str`` or ``int``) of *value*.

    ``bool`` is checked before ``int`` since it is a subclass of it.  Returns
    ``None`` for anything else.
    """
    for tag in SUPPORTED_TYPES:
        if isinstance(value, tag):
            return tag
    return None


def values_equal(left: Any, right: Any) -> bool:
    """Compare two answer values, requiring identical tags.

    ``True == 1`` is true in Python but a boolean answer never satisfies an
    integer condition here.
    """
    return value_tag(left) is value_tag(right) and left == right


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class Condition(BaseModel):
    """Ask the owning variable only if ``name`` was answered with ``value``."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Earlier variable to check")
    value: Value = Field(..., description="Value it must equal")


class Variable(BaseModel):
    """A single question asked to the user."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Context key the answer is stored under")
    prompt: str = Field(..., description="Question shown to the user")
    # Kept as Any so an unsupported default is reported when the variable is
    # resolved instead of as a parse failure.
    default: Any = Field(..., description="Default answer; its type sets the question type")
    choices: Optional[tuple[Value, ...]] = Field(
        default=None, description="Allowed answers, in display order"
    )
    validation: Optional[str] = Field(
        default=None, description="Regex a string answer must fully match"
    )
    only_if: Optional[Condition] = Field(
        default=None, description="Condition on an earlier answer"
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> "Variable":
        tag = value_tag(self.default)
        if self.choices is not None and not self.choices:
            raise ValueError(f"variable '{self.name}': choices must not be empty")
        # Unsupported defaults are reported by the resolver when asked.
        if self.choices is not None and tag is not None:
            for choice in self.choices:
                if value_tag(choice) is not tag:
                    raise ValueError(
                        f"variable '{self.name}': choice {choice!r} does not match "
                        f"the type of the default {self.default!r}"
                    )
            if not any(values_equal(choice, self.default) for choice in self.choices):
                raise ValueError(
                    f"variable '{self.name}': default {self.default!r} is not one of the choices"
                )
        if self.validation is not None:
            if tag is not str and tag is not None:
                raise ValueError(
                    f"variable '{self.name}': validation is only supported for string variables"
                )
            try:
                re.compile(self.validation)
            except re.error as exc:
                raise ValueError(
                    f"variable '{self.name}': invalid validation pattern: {exc}"
                ) from exc
        return self

    @property
    def validation_pattern(self) -> Optional[re.Pattern[str]]:
        """The compiled ``validation`` regex, if any."""
        if self.validation is None:
            return None
        return re.compile(self.validation)


class CleanupRule(BaseModel):
    """Delete ``paths`` from the output when ``name`` was answered with ``value``."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    value: Value
    paths: tuple[str, ...] = Field(default=(), description="Path templates, relative to the output")


class TemplateDefinition(BaseModel):
    """The parsed contents of a template's definition file.

    Unknown top-level keys (authors, version, ...) are ignored.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = Field(default=None, description="Display name of the template")
    description: Optional[str] = Field(default=None)
    variables: tuple[Variable, ...] = Field(default=())
    ignore: tuple[str, ...] = Field(default=(), description="Template-relative paths to skip")
    copy_without_render: tuple[str, ...] = Field(
        default=(), description="Globs matched against output-relative paths"
    )
    cleanup: tuple[CleanupRule, ...] = Field(default=())

    @model_validator(mode="after")
    def _check_references(self) -> "TemplateDefinition":
        seen: set[str] = set()
        for var in self.variables:
            if var.only_if is not None and var.only_if.name not in seen:
                raise ValueError(
                    f"variable '{var.name}': only_if refers to '{var.only_if.name}', "
                    "which is not declared before it"
                )
            if var.name in seen:
                raise ValueError(f"variable '{var.name}' is declared more than once")
            seen.add(var.name)
        return self


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def parse_definition(raw: str, path: str | Path | None = None) -> TemplateDefinition:
    """Parse TOML text into a validated ``TemplateDefinition``.

    Raises:
        InvalidDefinitionError: If the text is not TOML or fails validation.
    """
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidDefinitionError(f"invalid TOML: {exc}", path) from exc

    try:
        return TemplateDefinition.model_validate(data)
    except ValidationError as exc:
        raise InvalidDefinitionError(_format_validation_error(exc), path) from exc


def load_definition(path: str | Path) -> TemplateDefinition:
    """Read and validate the definition file at *path*.

    Raises:
        MissingDefinitionError: If *path* does not exist.
        InvalidDefinitionError: If the file cannot be read as UTF-8 TOML or
            fails validation.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise MissingDefinitionError(file_path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidDefinitionError(f"cannot read definition: {exc}", file_path) from exc
    return parse_definition(raw, file_path)


def _format_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into one line per problem."""
    lines = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        message = err.get("msg", "invalid value")
        lines.append(f"{location}: {message}" if location else message)
    return "; ".join(lines)
