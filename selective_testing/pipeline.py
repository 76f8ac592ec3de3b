"""Orchestrator: discover -> merge -> override -> changeset -> resolve -> test plan."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from selective_testing.changeset import changeset_from_paths, git_changeset
from selective_testing.discovery import (
    DiscoveryResult,
    LoadedProject,
    discover_packages,
    discover_project,
    find_packages,
    load_project,
    resolve_layout,
    run_units,
)
from selective_testing.discovery.facts import (
    PackageLoader,
    ProjectLoader,
    load_package_facts,
    load_project_facts,
)
from selective_testing.errors import DiscoveryError, WorkspaceNotFoundError
from selective_testing.graph.workspace_info import WorkspaceInfo
from selective_testing.models import TargetIdentity, normalize_path
from selective_testing.overrides import LoadedConfig, apply_overrides, find_default_config, load_config
from selective_testing.resolver import affected_targets, direct_hits
from selective_testing.testplan import enable_tests

logger = logging.getLogger(__name__)

DEFAULT_BASE_BRANCH = "main"

ProgressCallback = Callable[[str], None]


@dataclass
class RunConfig:
    """Configuration for one selective-testing run."""
    workspace: Path = field(default_factory=lambda: Path("."))
    base_branch: str | None = None
    changed_files: list[str] | None = None  # bypasses git when set
    config_file: Path | None = None
    test_plan: Path | None = None
    strict: bool = False
    max_workers: int | None = None
    skip_dirs: list[str] | None = None


@dataclass
class AssemblyResult:
    info: WorkspaceInfo
    warnings: list[str] = field(default_factory=list)


@dataclass
class SelectiveTestingResult:
    affected: set[TargetIdentity]
    direct: set[TargetIdentity]
    changeset: frozenset[Path]
    info: WorkspaceInfo
    warnings: list[str] = field(default_factory=list)
    enabled_tests: list[str] | None = None

    def sorted_affected(self) -> list[TargetIdentity]:
        return sorted(self.affected)

    def to_dict(self) -> dict:
        return {
            "affected": [t.to_dict() for t in self.sorted_affected()],
            "direct": [t.simple_description for t in sorted(self.direct)],
            "changed_files": sorted(str(p) for p in self.changeset),
            "warnings": list(self.warnings),
            "enabled_tests": self.enabled_tests,
        }


def parse_workspace(
    path: Path,
    config: LoadedConfig | None = None,
    *,
    strict: bool = False,
    max_workers: int | None = None,
    skip_dirs: list[str] | None = None,
    project_loader: ProjectLoader = load_project_facts,
    package_loader: PackageLoader = load_package_facts,
) -> AssemblyResult:
    """Build the consolidated workspace info for ``path``.

    Packages are found first so project discovery can resolve package
    products against them. Projects are loaded and then discovered in a
    thread pool; all partial infos are merged after the pool joins, in unit
    path order. A unit that fails only drops its own contribution unless
    ``strict`` is set.
    """
    try:
        layout = resolve_layout(path, skip_dirs=skip_dirs)
    except (OSError, ValueError) as e:
        raise DiscoveryError(f"Workspace definition {path} could not be loaded: {e}") from e

    warnings: list[str] = []

    # Stage 1: Packages
    packages, package_warnings = find_packages(
        layout.root,
        loader=package_loader,
        skip_dirs=skip_dirs,
        max_workers=max_workers,
        strict=strict,
    )
    warnings.extend(package_warnings)
    results: list[DiscoveryResult] = [discover_packages(packages, layout.root)]

    # Stage 2: Load project facts
    projects: list[LoadedProject] = []
    for outcome in run_units(lambda p: load_project(p, project_loader), layout.projects, max_workers):
        if outcome.ok:
            projects.append(outcome.value)
            continue
        msg = f"Project {outcome.unit} could not be loaded: {outcome.error}"
        if strict:
            raise DiscoveryError(msg) from outcome.error
        warnings.append(msg)

    # Stage 3: Discover projects against the shared, read-only tables
    by_path = {p.path: p for p in projects}
    for outcome in run_units(
        lambda p: discover_project(by_path[p], packages, projects, layout.definition),
        by_path,
        max_workers,
    ):
        if outcome.ok:
            results.append(outcome.value)
            continue
        msg = f"Project {outcome.unit} could not be analysed: {outcome.error}"
        if strict:
            raise DiscoveryError(msg) from outcome.error
        warnings.append(msg)

    # Stage 4: Merge
    for result in results:
        warnings.extend(result.warnings)
    info = WorkspaceInfo.merge_all([r.info for r in results])
    logger.info(
        "Parsed %d project(s) and %d package(s): %d target(s)",
        len(projects), len(packages), len(info.all_targets()),
    )

    # Stage 5: Manual overrides
    if config is not None:
        info, override_warnings = apply_overrides(info, config)
        warnings.extend(override_warnings)

    for w in warnings:
        logger.warning(w)
    return AssemblyResult(info=info, warnings=warnings)


def run_selective_testing(
    config: RunConfig,
    progress: ProgressCallback | None = None,
) -> SelectiveTestingResult:
    """Run the whole flow for ``config`` and return the affected targets."""
    workspace = normalize_path(config.workspace)
    if not workspace.exists():
        raise WorkspaceNotFoundError(f"Workspace path does not exist: {workspace}")
    workspace_dir = workspace if workspace.is_dir() else workspace.parent

    overrides = _load_overrides(config.config_file, workspace_dir)
    settings = overrides.config if overrides else None

    # 1. Changed files
    if progress:
        progress("Computing changeset")
    if config.changed_files is not None:
        changeset = changeset_from_paths(config.changed_files, Path.cwd())
    else:
        base_branch = config.base_branch or (settings and settings.base_branch) or DEFAULT_BASE_BRANCH
        changeset = git_changeset(workspace_dir, base_branch)
    logger.info("Changed files: %d", len(changeset))

    # 2. Workspace graph
    if progress:
        progress("Parsing workspace")
    assembly = parse_workspace(
        workspace,
        overrides,
        strict=config.strict,
        max_workers=config.max_workers,
        skip_dirs=config.skip_dirs,
    )

    # 3. Affected targets
    if progress:
        progress("Resolving affected targets")
    direct = direct_hits(assembly.info, changeset)
    affected = affected_targets(assembly.info, changeset)
    logger.info("Affected targets: %d (%d directly changed)", len(affected), len(direct))

    # 4. Test plan
    enabled = None
    plan = config.test_plan
    if plan is None and settings and settings.test_plan:
        plan = normalize_path(settings.test_plan, overrides.base_dir)
    if plan is not None:
        if progress:
            progress("Updating test plan")
        enabled = enable_tests(normalize_path(plan), affected)

    return SelectiveTestingResult(
        affected=affected,
        direct=direct,
        changeset=changeset,
        info=assembly.info,
        warnings=assembly.warnings,
        enabled_tests=enabled,
    )


def _load_overrides(config_file: Path | None, workspace_dir: Path) -> LoadedConfig | None:
    path = config_file or find_default_config(workspace_dir)
    if path is None:
        return None
    logger.debug("Using override config %s", path)
    return load_config(path)
