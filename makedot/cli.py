"""Command line: draw dependency graphs from a GNU make database."""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from .dot import render_png, render_targets, render_variables, write_dot
from .parser import MakeData, parse_db

__all__ = ["do_rewrites", "rewrite_file", "main"]


def do_rewrites(line: str, data: MakeData, rewrites: Sequence[str]) -> str:
    """Replace known values in ``line`` by variable references.

    Values of make variables whose names end in any of ``rewrites`` become
    ``$(NAME)``, longest values first. Afterwards the values of environment
    variables named in ``rewrites`` become ``$NAME``.
    """
    table = [
        (entry[2], name)
        for name, entry in data.values.items()
        if any(name.endswith(suffix) for suffix in rewrites)
    ]
    table.sort(key=lambda item: len(item[0].encode("utf-8")), reverse=True)

    result = line
    for value, name in table:
        result = result.replace(value, f"$({name})")

    for name in rewrites:
        env_value = os.environ.get(name)
        if env_value is not None:
            result = result.replace(env_value, f"${name}")
    return result


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def rewrite_file(path: str | Path, data: MakeData, rewrites: Sequence[str]) -> None:
    """Apply :func:`do_rewrites` to every line of a file, in place."""
    path = str(path)
    content = Path(path).read_text(encoding="utf-8")
    rewritten = "".join(
        do_rewrites(line, data, rewrites) + "\n" for line in _split_lines(content)
    )
    temporary = f"{path}.new"
    Path(temporary).write_text(rewritten, encoding="utf-8")
    os.replace(temporary, path)


def _non_negative(text: str) -> int:
    try:
        number = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="makedot",
        description="Generate dependency graphs from a GNU make database",
    )
    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("--targets", action="store_true")
    kind.add_argument("--variables", action="store_true")
    parser.add_argument("--maxthreads", type=_non_negative, default=3)
    parser.add_argument("--rewrite", action="append", default=[])
    parser.add_argument("--nodraw", action="append", default=[])
    parser.add_argument("--png", action="store_true")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("db_path", metavar="GNUMAKE_DB")
    return parser


def _run(args: argparse.Namespace) -> None:
    if args.debug:
        print(f"DEBUG: reading make DB from '{args.db_path}'", file=sys.stderr)
    data = parse_db(args.db_path)
    if args.debug:
        print(data.to_json())

    if args.targets:
        if args.debug:
            print(
                f"DEBUG: rendering targets graph (maxthreads={args.maxthreads}, "
                f"nodraw={json.dumps(args.nodraw)})",
                file=sys.stderr,
            )
        dot_text = render_targets(data, args.maxthreads, args.nodraw)
        if args.debug:
            print(f"--- TARGET GRAPH DOT ---\n{dot_text}")
        _publish(f"{data.goal}.targets.dot", dot_text, data, args)

    if args.variables:
        if args.debug:
            print("DEBUG: rendering variables graph", file=sys.stderr)
        dot_text = render_variables(data)
        if args.debug:
            print(f"--- VARIABLE GRAPH DOT ---\n{dot_text}")
        _publish(f"{data.goal}.variables.dot", dot_text, data, args)


def _publish(path: str, dot_text: str, data: MakeData, args: argparse.Namespace) -> None:
    write_dot(path, dot_text)
    if args.rewrite:
        rewrite_file(path, data, args.rewrite)
    if args.png:
        render_png(path)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    try:
        _run(args)
    except (OSError, ValueError) as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())