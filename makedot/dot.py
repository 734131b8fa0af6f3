"""Rendering make dependency data as Graphviz DOT text."""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from .parser import MakeData

__all__ = ["render_targets", "render_variables", "write_dot", "render_png"]

_HEADER = 'digraph gnumake {\n    node[shape=rect;style="rounded,bold"]; {\n'
_FOOTER = "    }\n}\n\n"

_Thread = list[str]
# start -> end -> path length -> threads
_Threads = dict[str, dict[str, dict[int, list[_Thread]]]]


def render_targets(data: MakeData, maxthreads: int, nodraw: Sequence[str]) -> str:
    """Render the target dependency graph reachable from the goal.

    Every root-to-leaf path ("thread") is drawn. Threads that share no
    inner vertex with another thread may be collapsed into a single
    summary node once there are more than ``maxthreads`` of them for the
    same start, end and length. Threads touching a node whose name
    contains any of the ``nodraw`` patterns are not drawn from that node on.
    """
    parts = [_HEADER]
    colours = _colour_map(data)
    threads, visits = _compute_threads(data.tgt_deps, data.goal)
    seen_edges: set[tuple[str, str]] = set()

    for start in sorted(threads):
        ends = threads[start]
        for end in sorted(ends):
            by_length = ends[end]
            for length in sorted(by_length, reverse=True):
                keep: list[_Thread] = []
                prune: list[_Thread] = []
                for thread in by_length[length]:
                    (keep if _has_shared_inner(thread, visits) else prune).append(thread)

                allowed = max(maxthreads - len(keep), 0)
                if len(prune) > allowed > 0:
                    summary = (
                        f"[{start} -> {end} ({length - 2} hops)\n"
                        f"{prune[allowed - 1][1]},{prune[allowed][1]}...\n"
                        f"{len(prune) - allowed + 1} items]"
                    )
                    colours[summary] = "color=blue"
                    prune = prune[: allowed - 1]
                    prune.append([start, summary, end])

                for thread in keep + prune:
                    _emit_thread(parts, thread, colours, nodraw, seen_edges)

    parts.append(_FOOTER)
    return "".join(parts)


def render_variables(data: MakeData) -> str:
    """Render the variable reference graph reachable from the goal."""
    parts = [_HEADER]
    seen: set[str] = set()
    _emit_variables(parts, data.var_deps, data.goal, seen)
    parts.append(_FOOTER)
    return "".join(parts)


def write_dot(path: str | Path, dot: str) -> None:
    """Write DOT text to ``path``."""
    Path(path).write_text(dot, encoding="utf-8")


def render_png(dot_path: str) -> None:
    """Run Graphviz ``dot`` to turn a ``.dot`` file into a ``.png`` file."""
    png_path = dot_path.replace(".dot", ".png")
    subprocess.run(["dot", "-Tpng", dot_path, "-o", png_path], check=False)


def _colour_map(data: MakeData) -> dict[str, str]:
    if data.goal in data.phony_targets:
        colours = {data.goal: 'color=red,style="rounded,filled"'}
    else:
        colours = {data.goal: "color=red"}

    for target, deps in data.tgt_deps.items():
        if target in colours:
            continue
        if target in data.phony_targets:
            style = 'color=green,style="rounded,filled"'
        elif target in data.intermediate_targets:
            style = "color=orange,style=dashed"
        elif not deps:
            style = "color=green"
        else:
            style = "color=orange"
        colours[target] = style
    return colours


def _compute_threads(
    graph: Mapping[str, Sequence[str]], root: str
) -> tuple[_Threads, dict[str, int]]:
    threads: _Threads = {}
    visits: dict[str, int] = {}

    def walk(node: str, stack: _Thread) -> None:
        path = [*stack, node]
        visits[node] = visits.get(node, 0) + 1
        deps = graph.get(node)
        if not deps:
            (
                threads.setdefault(path[0], {})
                .setdefault(node, {})
                .setdefault(len(path), [])
                .append(path)
            )
            return
        for dep in deps:
            walk(dep, path)

    walk(root, [])
    return threads, visits


def _has_shared_inner(thread: _Thread, visits: Mapping[str, int]) -> bool:
    """True if a vertex strictly inside the thread is visited more than once."""
    return any(visits.get(vertex, 0) > 1 for vertex in thread[1:-1])


def _emit_thread(
    parts: list[str],
    thread: _Thread,
    colours: dict[str, str],
    nodraw: Sequence[str],
    seen_edges: set[tuple[str, str]],
) -> None:
    for node in thread:
        if any(pattern in node for pattern in nodraw):
            return
        colour = colours.pop(node, None)
        if colour is not None:
            parts.append(f'\t"{node}" [ {colour} ];\n')
    for target, prereq in zip(thread, thread[1:]):
        edge = (prereq, target)
        if edge not in seen_edges:
            seen_edges.add(edge)
            parts.append(f'\t"{prereq}" -> "{target}";\n')


def _emit_variables(
    parts: list[str],
    var_deps: Mapping[str, Sequence[str]],
    target: str,
    seen: set[str],
) -> None:
    for var in var_deps.get(target, ()):
        edge = f'"{var}" -> "{target}";'
        if edge not in seen:
            seen.add(edge)
            parts.append(f"\t{edge}\n")
            _emit_variables(parts, var_deps, var, seen)