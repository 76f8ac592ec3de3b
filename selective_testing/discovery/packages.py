"""Package discovery: find manifests under the root, build the name table and its graph."""

from __future__ import annotations

import logging
from pathlib import Path

from selective_testing.discovery.base import DiscoveryResult, find_files, run_units
from selective_testing.discovery.facts import PACKAGE_MANIFEST, PackageLoader, load_package_facts
from selective_testing.errors import DiscoveryError
from selective_testing.graph.dependency_graph import DependencyGraph
from selective_testing.graph.workspace_info import WorkspaceInfo
from selective_testing.models import PackageMetadata, normalize_path

logger = logging.getLogger(__name__)

PackageTable = dict[str, PackageMetadata]


def load_package(manifest: Path, loader: PackageLoader = load_package_facts) -> PackageMetadata:
    facts = loader(manifest)
    return PackageMetadata(
        name=facts.name,
        path=normalize_path(manifest.parent),
        depends_on=frozenset(facts.dependencies),
    )


def find_packages(
    root: Path,
    *,
    loader: PackageLoader = load_package_facts,
    skip_dirs: list[str] | None = None,
    max_workers: int | None = None,
    strict: bool = False,
) -> tuple[PackageTable, list[str]]:
    """Load every package manifest under ``root`` into a name -> metadata table.

    Manifests that fail to load are dropped with a warning (or raise
    ``DiscoveryError`` when ``strict``). When two packages share a name the
    one with the lowest path is kept.
    """
    manifests = find_files(root, lambda p: p.name == PACKAGE_MANIFEST, skip_dirs)
    logger.debug("Found %d package manifest(s) under %s", len(manifests), root)

    warnings: list[str] = []
    table: PackageTable = {}
    for outcome in run_units(lambda m: load_package(m, loader), manifests, max_workers):
        if not outcome.ok:
            msg = f"Package manifest {outcome.unit} could not be loaded: {outcome.error}"
            if strict:
                raise DiscoveryError(msg) from outcome.error
            warnings.append(msg)
            continue

        metadata: PackageMetadata = outcome.value
        existing = table.get(metadata.name)
        if existing is not None:
            keep, drop = sorted([existing, metadata], key=lambda m: str(m.path))
            warnings.append(
                f"Package {metadata.name} is defined at {keep.path} and {drop.path}; using {keep.path}"
            )
            table[metadata.name] = keep
            continue
        table[metadata.name] = metadata

    return table, warnings


def discover_packages(table: PackageTable, root: Path = Path(".")) -> DiscoveryResult:
    """Partial workspace info for the package universe.

    Each package owns its whole directory and depends on the packages it
    names; names missing from the table produce a warning.
    """
    graph = DependencyGraph()
    folders = {}
    warnings: list[str] = []

    for name in sorted(table):
        metadata = table[name]
        identity = metadata.target_identity()
        folders[metadata.path] = identity

        for dependency in sorted(metadata.depends_on):
            target = table.get(dependency)
            if target is None:
                warnings.append(f"Package {name}: dependency {dependency} not found")
                continue
            graph.insert(identity, target.target_identity())

    return DiscoveryResult(
        unit=root,
        info=WorkspaceInfo(folders=folders, dependency_structure=graph),
        warnings=tuple(warnings),
    )
