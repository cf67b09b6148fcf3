"""Shared pytest fixtures for the stencil test suite.

Provides reusable fixtures for:
- Building template trees (with a ``template.toml``) under ``tmp_path``
- A scripted prompter that answers by prompt text and records questions
- A default output directory
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pytest


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """Prompter double: answers come from a ``{prompt: answer}`` mapping.

    Prompts without a scripted answer get their default.  Every question asked
    is recorded in ``asked`` as ``(kind, prompt)``.
    """

    def __init__(self, answers: Optional[dict[str, Any]] = None) -> None:
        self.answers = dict(answers or {})
        self.asked: list[tuple[str, str]] = []

    def _answer(self, kind: str, prompt: str, default: Any) -> Any:
        self.asked.append((kind, prompt))
        return self.answers.get(prompt, default)

    def ask_boolean(self, prompt: str, default: bool) -> bool:
        return self._answer("boolean", prompt, default)

    def ask_string(self, prompt: str, default: str, validation=None) -> str:
        return self._answer("string", prompt, default)

    def ask_integer(self, prompt: str, default: int) -> int:
        return self._answer("integer", prompt, default)

    def ask_choice(self, prompt: str, default: Any, choices: Sequence[Any]) -> Any:
        return self._answer("choice", prompt, default)

    @property
    def prompts(self) -> list[str]:
        return [prompt for _, prompt in self.asked]


@pytest.fixture
def scripted_prompter() -> Callable[..., ScriptedPrompter]:
    """Factory for ``ScriptedPrompter`` instances."""
    return ScriptedPrompter


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory that writes a template tree and returns its root.

    ``files`` maps template-relative paths to ``str`` (written as UTF-8),
    ``bytes`` (written raw) or ``None`` (an empty directory).  ``definition``
    is dedented and written to ``template.toml`` unless it is ``None``.
    """

    def _make(
        files: dict[str, str | bytes | None],
        definition: Optional[str] = "",
        name: str = "template",
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True)
        if definition is not None:
            (root / "template.toml").write_text(textwrap.dedent(definition), encoding="utf-8")
        for rel, content in files.items():
            path = root / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Destination for generated projects; not created up front."""
    return tmp_path / "output"


@pytest.fixture
def png_bytes() -> bytes:
    """The first bytes of a real PNG file (signature + IHDR chunk)."""
    return (
        b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
        b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    )
