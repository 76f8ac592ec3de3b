"""Dependency graph over target identities: insert, merge, invert, name lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from selective_testing.models import TargetIdentity


@dataclass
class DependencyGraph:
    """``depends_on[a]`` is the set of targets ``a`` directly depends on.

    A target without a key has no known dependencies; it is not unknown.
    """
    depends_on: dict[TargetIdentity, set[TargetIdentity]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        edges = self.depends_on
        self.depends_on = {}
        for source, targets in edges.items():
            for target in targets:
                self.insert(source, target)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[TargetIdentity, TargetIdentity]]) -> DependencyGraph:
        graph = cls()
        for source, target in edges:
            graph.insert(source, target)
        return graph

    def insert(self, source: TargetIdentity, depends_on: TargetIdentity) -> None:
        """Add the edge ``source -> depends_on``; self-loops are ignored."""
        if source == depends_on:
            return
        self.depends_on.setdefault(source, set()).add(depends_on)

    def merging(self, other: DependencyGraph) -> DependencyGraph:
        """Union of both graphs. Neither input is modified."""
        return DependencyGraph(merge_set_maps(self.depends_on, other.depends_on))

    def dependencies(self, target: TargetIdentity) -> set[TargetIdentity]:
        return set(self.depends_on.get(target, ()))

    def edges(self) -> set[tuple[TargetIdentity, TargetIdentity]]:
        return {
            (source, target)
            for source, targets in self.depends_on.items()
            for target in targets
        }

    def all_targets(self) -> set[TargetIdentity]:
        """Every identity that appears as a key or as a dependency."""
        result = set(self.depends_on)
        for targets in self.depends_on.values():
            result.update(targets)
        return result

    def dependents(self) -> dict[TargetIdentity, set[TargetIdentity]]:
        """Inverted graph: target -> {targets that directly depend on it}."""
        reverse: dict[TargetIdentity, set[TargetIdentity]] = {}
        for source, targets in self.depends_on.items():
            for target in targets:
                reverse.setdefault(target, set()).add(source)
        return reverse

    def find_target(
        self,
        short_or_full_name: str,
        extra: Iterable[TargetIdentity] = (),
    ) -> TargetIdentity | None:
        """Resolve a human-supplied target name.

        Tried in order: full ``description``, ``simple_description``, bare
        target name. Inside a tier the lowest identity in (path, name) order
        wins, so ambiguous short names resolve the same way on every run.
        ``extra`` adds identities that have no edges (e.g. targets only known
        through file ownership).
        """
        name = short_or_full_name.strip()
        candidates = sorted(self.all_targets().union(extra))

        for key in (
            lambda t: t.description,
            lambda t: t.simple_description,
            lambda t: t.name,
        ):
            for target in candidates:
                if key(target) == name:
                    return target
        return None

    def __len__(self) -> int:
        return len(self.all_targets())


def merge_set_maps(a: Mapping, b: Mapping) -> dict:
    result = {key: set(values) for key, values in a.items()}
    for key, values in b.items():
        result.setdefault(key, set()).update(values)
    return result
