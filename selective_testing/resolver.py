"""Affected-targets resolver: map changed files to targets, then walk dependents."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Iterable

from selective_testing.graph.workspace_info import WorkspaceInfo
from selective_testing.models import TargetIdentity, normalize_path


def direct_hits(info: WorkspaceInfo, changeset: Iterable[Path]) -> set[TargetIdentity]:
    """Targets that own a changed path.

    An exact file match wins; otherwise the deepest owned folder containing
    the path is used. Paths nobody owns are ignored.
    """
    owners: dict[Path, set[TargetIdentity]] = {}
    for target, paths in info.files.items():
        for path in paths:
            owners.setdefault(path, set()).add(target)

    hits: set[TargetIdentity] = set()
    for changed in changeset:
        changed = normalize_path(changed)
        exact = owners.get(changed)
        if exact:
            hits.update(exact)
            continue
        folder_owner = _deepest_folder_owner(info.folders, changed)
        if folder_owner is not None:
            hits.add(folder_owner)
    return hits


def affected_targets(info: WorkspaceInfo, changeset: Iterable[Path]) -> set[TargetIdentity]:
    """Direct hits plus every target that depends on one of them, transitively.

    Breadth-first over the inverted graph; the visited set makes cycles
    terminate, with every member of a reached cycle affected.
    """
    affected = direct_hits(info, changeset)
    dependents = info.dependency_structure.dependents()

    queue = deque(sorted(affected))
    while queue:
        current = queue.popleft()
        for dependent in dependents.get(current, ()):
            if dependent not in affected:
                affected.add(dependent)
                queue.append(dependent)
    return affected


def _deepest_folder_owner(folders: dict[Path, TargetIdentity], path: Path) -> TargetIdentity | None:
    # The path itself first, then its parents deepest first; the first hit is the most specific folder
    for candidate in (path, *path.parents):
        owner = folders.get(candidate)
        if owner is not None:
            return owner
    return None
