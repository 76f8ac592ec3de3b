"""Dependency graph engine."""

from __future__ import annotations

from selective_testing.graph.dependency_graph import DependencyGraph
from selective_testing.graph.render import render_files, render_graph
from selective_testing.graph.workspace_info import WorkspaceInfo

__all__ = [
    "DependencyGraph",
    "WorkspaceInfo",
    "render_files",
    "render_graph",
]
