"""Project discovery: targets, their files, and their edges to targets and packages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from selective_testing.discovery.base import DiscoveryResult
from selective_testing.discovery.facts import ProjectFacts, ProjectLoader, load_project_facts
from selective_testing.discovery.packages import PackageTable
from selective_testing.graph.dependency_graph import DependencyGraph
from selective_testing.graph.workspace_info import WorkspaceInfo
from selective_testing.models import TargetIdentity, normalize_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedProject:
    """A project definition path with its loaded facts."""
    path: Path
    facts: ProjectFacts

    @property
    def directory(self) -> Path:
        return self.path.parent


def load_project(path: Path, loader: ProjectLoader = load_project_facts) -> LoadedProject:
    path = normalize_path(path)
    return LoadedProject(path=path, facts=loader(path))


def discover_project(
    project: LoadedProject,
    packages: PackageTable,
    all_projects: list[LoadedProject],
    workspace_definition: Path | None = None,
) -> DiscoveryResult:
    """Build the partial workspace info of one project.

    ``packages`` and ``all_projects`` are shared between concurrent calls
    and only read here.
    """
    graph = DependencyGraph()
    files: dict[TargetIdentity, set[Path]] = {}
    folders: dict[Path, TargetIdentity] = {}
    warnings: list[str] = []

    # Every target owns its project definition and the workspace definition
    definitions = {project.path}
    if workspace_definition is not None:
        definitions.add(normalize_path(workspace_definition))

    for target in project.facts.targets:
        identity = TargetIdentity.project(project.path, target.name)

        # Step 1: Dependencies on targets of the same project
        for name in target.dependencies:
            graph.insert(identity, TargetIdentity.project(project.path, name))

        # Step 2: Package products
        for product in target.package_products:
            metadata = packages.get(product)
            if metadata is None:
                warnings.append(f"{identity.simple_description}: package {product} not found")
                continue
            graph.insert(identity, metadata.target_identity())

        # Step 3: Linked products built by targets of other projects
        for linked in target.linked_products:
            for other in all_projects:
                for candidate in other.facts.targets:
                    if candidate.product_name and candidate.product_name == linked:
                        graph.insert(identity, TargetIdentity.project(other.path, candidate.name))

        # Step 4: Owned files and folders
        owned = {
            normalize_path(p, project.directory)
            for p in [*target.sources, *target.resources]
        }
        for path in owned:
            if path.is_dir():
                folders[path] = identity
        files[identity] = owned | definitions

    logger.debug(
        "Project %s: %d target(s), %d edge(s)",
        project.path.name, len(files), len(graph.edges()),
    )
    return DiscoveryResult(
        unit=project.path,
        info=WorkspaceInfo(files=files, folders=folders, dependency_structure=graph),
        warnings=tuple(warnings),
    )
