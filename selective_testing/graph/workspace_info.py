"""Workspace info: file ownership, folder ownership and the dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from selective_testing.graph.dependency_graph import DependencyGraph, merge_set_maps
from selective_testing.models import TargetIdentity


@dataclass(frozen=True)
class WorkspaceInfo:
    """Consolidated knowledge about a workspace.

    Partial infos are built once per discovery unit and never mutated
    afterwards; combine them with ``merging``.
    """
    files: dict[TargetIdentity, set[Path]] = field(default_factory=dict)
    folders: dict[Path, TargetIdentity] = field(default_factory=dict)
    dependency_structure: DependencyGraph = field(default_factory=DependencyGraph)

    def merging(self, other: WorkspaceInfo) -> WorkspaceInfo:
        """Union of two infos.

        Files are unioned per target and graphs merged. Two different owners
        of the same folder is a configuration error; the lower identity keeps
        it so the result does not depend on merge order.
        """
        folders = dict(self.folders)
        for path, owner in other.folders.items():
            current = folders.get(path)
            if current is None or owner < current:
                folders[path] = owner

        return WorkspaceInfo(
            files=merge_set_maps(self.files, other.files),
            folders=folders,
            dependency_structure=self.dependency_structure.merging(other.dependency_structure),
        )

    @classmethod
    def merge_all(cls, infos: list[WorkspaceInfo]) -> WorkspaceInfo:
        result = cls()
        for info in infos:
            result = result.merging(info)
        return result

    def all_targets(self) -> set[TargetIdentity]:
        targets = self.dependency_structure.all_targets()
        targets.update(self.files)
        targets.update(self.folders.values())
        return targets

    def find_target(self, short_or_full_name: str) -> TargetIdentity | None:
        return self.dependency_structure.find_target(
            short_or_full_name,
            extra=set(self.files).union(self.folders.values()),
        )
