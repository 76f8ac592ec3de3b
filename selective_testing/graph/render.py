"""ASCII rendering of a dependency graph and of file ownership, for diagnostics."""

from __future__ import annotations

from selective_testing.graph.dependency_graph import DependencyGraph
from selective_testing.graph.workspace_info import WorkspaceInfo
from selective_testing.models import TargetIdentity


def render_graph(graph: DependencyGraph) -> str:
    """Render the graph as an indented tree, one root per top-level target.

    Roots are targets nothing depends on. Subtrees already printed are
    marked ``(…)`` instead of being expanded again, and back edges are
    marked ``(cycle)``. When every target sits on a cycle, all targets
    become roots.
    """
    targets = sorted(graph.all_targets())
    if not targets:
        return "(empty graph)"

    depended_on = set(graph.dependents())
    roots = [t for t in targets if t not in depended_on] or targets

    lines: list[str] = []
    expanded: set[TargetIdentity] = set()
    for root in roots:
        lines.append(root.simple_description)
        _render_children(graph, root, "", {root}, expanded, lines)
        expanded.add(root)
    return "\n".join(lines)


def render_files(info: WorkspaceInfo) -> str:
    """List every target followed by the files and folders it owns."""
    folders_by_target: dict[TargetIdentity, list[str]] = {}
    for folder, owner in info.folders.items():
        folders_by_target.setdefault(owner, []).append(f"{folder}/")

    lines: list[str] = []
    for target in sorted(set(info.files) | set(folders_by_target)):
        lines.append(f"{target.simple_description}:")
        owned = sorted(str(p) for p in info.files.get(target, ()))
        owned += sorted(folders_by_target.get(target, []))
        for entry in owned:
            lines.append(f"\t{entry}")
    return "\n".join(lines)


def _render_children(
    graph: DependencyGraph,
    node: TargetIdentity,
    prefix: str,
    path: set[TargetIdentity],
    expanded: set[TargetIdentity],
    lines: list[str],
) -> None:
    children = sorted(graph.dependencies(node))
    for i, child in enumerate(children):
        is_last = i == len(children) - 1
        connector = "└── " if is_last else "├── "

        if child in path:
            lines.append(f"{prefix}{connector}{child.simple_description} (cycle)")
            continue
        if child in expanded and graph.dependencies(child):
            lines.append(f"{prefix}{connector}{child.simple_description} (…)")
            continue

        lines.append(f"{prefix}{connector}{child.simple_description}")
        _render_children(
            graph,
            child,
            prefix + ("    " if is_last else "│   "),
            path | {child},
            expanded,
            lines,
        )
        expanded.add(child)
