"""Command-line entry point.

Examples:
- hephaestus init -m myapp.errors
- hephaestus init -m myapp.errors -m myapp.billing -o config/exceptions.json --force
"""

from __future__ import annotations

import argparse
import importlib
import json
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from hephaestus.patterns import DEFAULT_PATTERNS_FILE, build_patterns, write_patterns

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


def iter_exception_classes(
    modules: Sequence[str] = (),
) -> Iterator[type[Exception]]:
    """Yield every loaded ``Exception`` subclass, optionally limited to *modules*.

    A module filter also matches its submodules (``myapp`` matches
    ``myapp.errors``).
    """
    seen: set[type] = set()
    stack: list[type] = list(Exception.__subclasses__())
    while stack:
        cls = stack.pop()
        if cls in seen:
            continue
        seen.add(cls)
        stack.extend(cls.__subclasses__())
        if modules and not any(
            cls.__module__ == m or cls.__module__.startswith(m + ".") for m in modules
        ):
            continue
        yield cls


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def cmd_init(args: argparse.Namespace) -> int:
    for name in args.modules:
        try:
            importlib.import_module(name)
        except ImportError as exc:
            print(f"error: cannot import {name}: {exc}", file=sys.stderr)
            return 1

    print("Initializing Hephaestus exception patterns")
    patterns = build_patterns(iter_exception_classes(args.modules))
    target = Path(args.output)

    if target.exists() and not args.force:
        if not _confirm(f"{target} already exists. Do you want to overwrite it?"):
            print("Operation cancelled.")
            return 0

    write_patterns(target, patterns)
    print(f"{target} has been generated successfully.")
    print(f"Found {len(patterns)} exception classes.")
    print(f"You can now edit the messages and descriptions in {target}")

    if patterns:
        first = next(iter(patterns))
        print()
        print("Generated format example:")
        print(json.dumps({first: patterns[first].model_dump()}, indent=4))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hephaestus",
        description="Hephaestus error-handling utilities.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser(
        "init",
        help="Generate an exception patterns file",
        description=(
            "Generate an exceptions.json file with a message and description "
            "for every exception class found."
        ),
    )
    init.add_argument(
        "-m",
        "--module",
        dest="modules",
        action="append",
        default=[],
        help="Import this module and only include its exceptions (repeatable)",
    )
    init.add_argument(
        "-o",
        "--output",
        default=DEFAULT_PATTERNS_FILE,
        help=f"Target file (default: {DEFAULT_PATTERNS_FILE})",
    )
    init.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )
    init.set_defaults(func=cmd_init)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
