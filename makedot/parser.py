"""Reading a GNU make database dump (``make -p``) into plain data."""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

__all__ = ["MakeData", "scan_for_targets", "parse_stream", "parse_db"]

_TARGET_LINE = re.compile(r"^(\S+):\s*(.*)$")
_ASSIGNMENT = re.compile(r"^(\S+)\s*([:?]?=)\s*(.+)$")
_VAR_BRACKETS = "(){}"


@dataclass
class MakeData:
    """Targets, variables and their dependencies found in a make database."""

    goal: str = ""
    tgt_deps: dict[str, list[str]] = field(default_factory=dict)
    var_deps: dict[str, list[str]] = field(default_factory=dict)
    phony_targets: set[str] = field(default_factory=set)
    intermediate_targets: set[str] = field(default_factory=set)
    values: dict[str, tuple[str, int, str]] = field(default_factory=dict)

    def to_json(self) -> str:
        """Return a pretty-printed JSON representation."""
        document = {
            "goal": self.goal,
            "tgt_deps": self.tgt_deps,
            "var_deps": self.var_deps,
            "phony_targets": sorted(self.phony_targets),
            "intermediate_targets": sorted(self.intermediate_targets),
            "values": {name: list(entry) for name, entry in self.values.items()},
        }
        return json.dumps(document, indent=2)


def scan_for_targets(text: str) -> list[str]:
    """Split a prerequisite list into target names.

    Scanning stops at ``|`` (order-only prerequisites). An ``=`` marks a
    target-specific assignment: the word before it is dropped and scanning
    stops. Quotes group words and are removed.
    """
    found: list[str] = []
    word: list[str] = []
    in_quotes = False
    for ch in text:
        if ch == "|":
            break
        if ch == "=":
            if found:
                found.pop()
            word.clear()
            break
        if ch in "\"'":
            in_quotes = not in_quotes
        elif ch == " " and not in_quotes:
            if word:
                found.append("".join(word))
                word.clear()
        else:
            word.append(ch)
    if word:
        found.append("".join(word))
    return found


def _logical_lines(stream: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Yield (line number of the last physical line, joined line) pairs."""
    lines = iter(stream)
    lineno = 0
    for raw in lines:
        lineno += 1
        line = raw.rstrip()
        while line.endswith("\\"):
            line = line[:-1]
            lineno += 1
            line += next(lines, "").rstrip()
        yield lineno, line


def _variable_references(value: str) -> list[str]:
    references = []
    for part in value.split():
        if part.startswith("$"):
            name = part[1:].strip(_VAR_BRACKETS)
            if len(name.encode("utf-8")) > 1:
                references.append(name)
    return references


def parse_stream(stream: Iterable[str]) -> MakeData:
    """Parse make database lines from any iterable of text lines."""
    data = MakeData()
    default_goal = ""
    cmd_goals = ""

    for lineno, line in _logical_lines(stream):
        target_match = _TARGET_LINE.match(line)
        if target_match:
            target = target_match.group(1)
            deps = scan_for_targets(target_match.group(2))
            if target == ".PHONY":
                data.phony_targets.update(deps)
            elif target == ".INTERMEDIATE":
                data.intermediate_targets.update(deps)
            else:
                data.tgt_deps.setdefault(target, []).extend(deps)
            continue

        assign_match = _ASSIGNMENT.match(line)
        if assign_match:
            name = assign_match.group(1)
            value = assign_match.group(3)
            if name == "MAKECMDGOALS":
                cmd_goals = value
            elif name == ".DEFAULT_GOAL":
                default_goal = value
            data.values[name] = ("", lineno, value)
            references = _variable_references(value)
            if references:
                data.var_deps.setdefault(name, []).extend(references)

    goals = cmd_goals.split()
    data.goal = goals[0] if goals else default_goal
    return data


def parse_db(path: str | Path) -> MakeData:
    """Parse a make database file; ``-`` reads standard input."""
    if str(path) == "-":
        return parse_stream(sys.stdin)
    with open(path, encoding="utf-8") as handle:
        return parse_stream(handle)