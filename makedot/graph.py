"""Directed dependency graphs built from make data.

A graph is a mapping from each node to the list of nodes it points at,
with nodes kept in the order they were first seen. Edges run from a
prerequisite (or referenced variable) to the node that depends on it.
Repeated dependencies give repeated edges.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

__all__ = ["build_target_graph", "build_var_graph"]


def _inverted(deps: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
    graph: dict[str, list[str]] = {}
    for node, sources in deps.items():
        graph.setdefault(node, [])
        for source in sources:
            graph.setdefault(source, []).append(node)
    return graph


def build_target_graph(tgt_deps: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
    """Graph with an edge from every prerequisite to its target."""
    return _inverted(tgt_deps)


def build_var_graph(var_deps: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
    """Graph with an edge from every referenced variable to its user."""
    return _inverted(var_deps)