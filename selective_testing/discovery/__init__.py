"""Discovery of project and package units."""

from __future__ import annotations

from selective_testing.discovery.base import DEFAULT_SKIP_DIRS, DiscoveryResult, find_files, run_units
from selective_testing.discovery.packages import discover_packages, find_packages, load_package
from selective_testing.discovery.projects import LoadedProject, discover_project, load_project
from selective_testing.discovery.workspace import WorkspaceLayout, resolve_layout

__all__ = [
    "DEFAULT_SKIP_DIRS",
    "DiscoveryResult",
    "LoadedProject",
    "WorkspaceLayout",
    "discover_packages",
    "discover_project",
    "find_files",
    "find_packages",
    "load_package",
    "load_project",
    "resolve_layout",
    "run_units",
]
