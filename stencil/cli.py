"""Command-line entry point.

Usage::

    stencil ./my-template -o ./my-project
    stencil https://github.com/user/template.git --directory python -o out
    stencil ./my-template --no-input
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape

from stencil import __version__
from stencil.config import GeneratorConfig, IgnoreMatch
from stencil.errors import StencilError
from stencil.generator import GenerationResult, Template
from stencil.prompt import ConsolePrompter, DefaultsPrompter, Prompter
from stencil.utils import print_error, print_summary_table, print_warning


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stencil",
        description="stencil -- generate a project from a template directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stencil ./my-template -o ./my-project\n"
            "  stencil https://github.com/user/template.git --directory python\n"
            "  stencil ./my-template --no-input\n"
        ),
    )
    parser.add_argument(
        "template",
        help="Local template directory or git remote URL",
    )
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Sub-directory of the source that holds the template",
    )
    parser.add_argument(
        "--no-input",
        action="store_true",
        help="Do not prompt; use every variable's default",
    )
    parser.add_argument(
        "--ignore-match",
        choices=[m.value for m in IgnoreMatch],
        default=None,
        help="How 'ignore' entries match paths (default: component)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


async def run(
    source: str,
    output: str | Path,
    config: GeneratorConfig,
    prompter: Prompter,
    directory: str | None = None,
) -> GenerationResult:
    """Acquire the template, generate it and drop any temporary clone."""
    template = await Template.from_input(source, config, directory=directory)
    try:
        return await template.generate(output, prompter)
    finally:
        template.close()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``stencil`` and ``python -m stencil``."""
    args = build_parser().parse_args(argv)

    config = GeneratorConfig.from_env()
    if args.ignore_match:
        config.ignore_match = IgnoreMatch(args.ignore_match)

    prompter: Prompter = DefaultsPrompter() if args.no_input else ConsolePrompter()

    try:
        result = asyncio.run(
            run(args.template, args.output, config, prompter, directory=args.directory)
        )
    except StencilError as exc:
        print_error(escape(f"Error [{exc.kind}]: {exc}"))
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("Aborted.")
        sys.exit(130)

    print_summary_table(
        {
            "Output": str(result.output_dir),
            "Directories": str(len(result.walk.directories)),
            "Rendered files": str(len(result.walk.rendered)),
            "Copied files": str(len(result.walk.copied)),
            "Removed by cleanup": str(len(result.removed)),
        },
        title="Generation summary",
    )


if __name__ == "__main__":
    main()
