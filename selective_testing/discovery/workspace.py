"""Resolve the analysed path into a workspace definition and its project units."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from selective_testing.discovery.base import find_files
from selective_testing.discovery.facts import (
    WorkspaceFacts,
    is_project_definition,
    is_workspace_definition,
    load_workspace_facts,
)
from selective_testing.errors import WorkspaceNotFoundError
from selective_testing.models import normalize_path

WorkspaceLoader = Callable[[Path], WorkspaceFacts]


@dataclass(frozen=True)
class WorkspaceLayout:
    """Where to look for packages and which project units to parse."""
    root: Path
    definition: Path | None = None
    projects: list[Path] = field(default_factory=list)


def resolve_layout(
    path: Path,
    *,
    loader: WorkspaceLoader = load_workspace_facts,
    skip_dirs: list[str] | None = None,
) -> WorkspaceLayout:
    """Work out the units to parse from a workspace, project or directory path.

    - ``*.workspace.json``: the projects it lists; packages are searched
      under its directory.
    - ``*.project.json``: that project alone.
    - a directory: its single top-level workspace definition if there is
      one, otherwise every project definition found below it.

    A load failure of the workspace definition itself propagates; without
    it there is nothing to analyse.
    """
    path = normalize_path(path)
    if not path.exists():
        raise WorkspaceNotFoundError(f"Workspace path does not exist: {path}")

    if path.is_dir():
        workspaces = sorted(p for p in path.iterdir() if p.is_file() and is_workspace_definition(p))
        if len(workspaces) == 1:
            return resolve_layout(workspaces[0], loader=loader, skip_dirs=skip_dirs)
        projects = find_files(path, is_project_definition, skip_dirs)
        return WorkspaceLayout(root=path, projects=projects)

    if is_workspace_definition(path):
        facts = loader(path)
        projects = [normalize_path(p, path.parent) for p in facts.projects]
        return WorkspaceLayout(root=path.parent, definition=path, projects=projects)

    if is_project_definition(path):
        return WorkspaceLayout(root=path.parent, projects=[path])

    raise WorkspaceNotFoundError(
        f"Not a workspace, project definition or directory: {path}"
    )
