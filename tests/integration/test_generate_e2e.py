"""End-to-end generation tests.

These run the real resolver, walker and cleanup pass against small template
trees on disk, the way ``stencil ./template -o out`` would, and check the
resulting project tree.

No network or git access is required.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from stencil.generator import Template


pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _tree(root: Path) -> dict[str, bytes | None]:
    """Snapshot a directory: relative POSIX path -> bytes (``None`` for dirs)."""
    snapshot: dict[str, bytes | None] = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        snapshot[rel] = None if path.is_dir() else path.read_bytes()
    return snapshot


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    @pytest.mark.asyncio
    async def test_renders_paths_and_content(self, make_template, output_dir, scripted_prompter):
        root = make_template(
            {"{{project_name}}/main.txt": "Hello {{project_name}}"},
            definition="""
            [[variables]]
            name = "project_name"
            prompt = "Project name?"
            default = "app"
            """,
        )
        prompter = scripted_prompter({"Project name?": "demo"})
        await Template(root).generate(output_dir, prompter)

        assert _tree(output_dir) == {"demo": None, "demo/main.txt": b"Hello demo"}

    @pytest.mark.asyncio
    async def test_ignored_file_not_written(self, make_template, output_dir):
        root = make_template(
            {"secret.txt": "{{ undefined }}", "keep.txt": "keep"},
            definition='ignore = ["secret.txt"]\n',
        )
        result = await Template(root).generate(output_dir)

        assert _tree(output_dir) == {"keep.txt": b"keep"}
        assert result.walk.ignored == [Path("secret.txt")]

    @pytest.mark.asyncio
    async def test_cleanup_removes_dockerfile(self, make_template, output_dir):
        root = make_template(
            {"Dockerfile": "FROM python:3.12\n", "app.py": "print('hi')\n"},
            definition="""
            [[variables]]
            name = "use_docker"
            prompt = "Use docker?"
            default = false

            [[cleanup]]
            name = "use_docker"
            value = false
            paths = ["Dockerfile"]
            """,
        )
        result = await Template(root).generate(output_dir)

        assert _tree(output_dir) == {"app.py": b"print('hi')\n"}
        assert result.removed == [Path("Dockerfile")]
        assert result.files == [Path("app.py")]

    @pytest.mark.asyncio
    async def test_binary_copied_byte_for_byte(self, make_template, output_dir, png_bytes):
        # "{{" inside the image must not reach the template engine.
        image = png_bytes + b"{{ not a template }}" + b"\x00" * 16
        root = make_template(
            {
                "static/logo.png": image,
                "static/icon.dat": b"\x00\x01{{ x }}",
                "static/fake.png": "{{ not rendered }}\n",
            },
            definition='copy_without_render = ["*.png"]\n',
        )
        result = await Template(root).generate(output_dir)

        assert (output_dir / "static" / "logo.png").read_bytes() == image
        assert (output_dir / "static" / "icon.dat").read_bytes() == b"\x00\x01{{ x }}"
        assert (output_dir / "static" / "fake.png").read_text(encoding="utf-8") == (
            "{{ not rendered }}\n"
        )
        assert sorted(result.walk.copied) == [
            Path("static/fake.png"),
            Path("static/icon.dat"),
            Path("static/logo.png"),
        ]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestProperties:
    @pytest.mark.asyncio
    async def test_plain_template_is_copied_identically(self, make_template, output_dir):
        files = {
            "README.md": "# plain project\n",
            "src/pkg/__init__.py": "",
            "src/pkg/core.py": "def f():\n    return {'a': 1}\n",
            "docs": None,
        }
        root = make_template(files, definition="")
        await Template(root).generate(output_dir)

        expected = _tree(root)
        del expected["template.toml"]
        assert _tree(output_dir) == expected

    @pytest.mark.asyncio
    async def test_generation_is_repeatable(self, make_template, tmp_path):
        root = make_template(
            {
                "{{ name }}/a.txt": "{{ name | upper }}",
                "{{ name }}/b.bin": b"\x00\x01\x02",
                "extra.txt": "{% if docs %}docs{% endif %}",
            },
            definition="""
            [[variables]]
            name = "name"
            prompt = "Name?"
            default = "pkg"

            [[variables]]
            name = "docs"
            prompt = "Docs?"
            default = true

            [[cleanup]]
            name = "docs"
            value = false
            paths = ["extra.txt"]
            """,
        )
        first, second = tmp_path / "first", tmp_path / "second"
        await Template(root).generate(first)
        await Template(root).generate(second)
        assert _tree(first) == _tree(second)

        # Running again over an existing output gives the same tree.
        await Template(root).generate(first)
        assert _tree(first) == _tree(second)

    @pytest.mark.asyncio
    async def test_conditional_question_and_cleanup(self, make_template, output_dir, scripted_prompter):
        root = make_template(
            {
                "{{ project_name }}/settings.txt": "db={{ database | default('none') }}\n",
                "{{ project_name }}/migrations/0001.sql": "-- init\n",
            },
            definition="""
            [[variables]]
            name = "project_name"
            prompt = "Project name?"
            default = "app"

            [[variables]]
            name = "use_db"
            prompt = "Use a database?"
            default = true

            [[variables]]
            name = "database"
            prompt = "Which database?"
            default = "postgres"
            choices = ["postgres", "sqlite"]
            only_if = { name = "use_db", value = true }

            [[cleanup]]
            name = "use_db"
            value = false
            paths = ["{{ project_name }}/migrations"]
            """,
        )
        prompter = scripted_prompter({"Project name?": "shop", "Use a database?": False})
        result = await Template(root).generate(output_dir, prompter)

        assert "Which database?" not in prompter.prompts
        assert "database" not in result.context
        assert _tree(output_dir) == {
            "shop": None,
            "shop/settings.txt": b"db=none\n",
        }
