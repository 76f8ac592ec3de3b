"""Fact documents consumed by discovery, and the default JSON loaders for them.

The graph engine never reads project files itself. A loader turns one
description unit into these validated models; any format can be supported
by passing a different loader to the pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

PROJECT_SUFFIX = ".project.json"
WORKSPACE_SUFFIX = ".workspace.json"
PACKAGE_MANIFEST = "package.manifest.json"


class _Facts(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class TargetFacts(_Facts):
    name: str
    product_name: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    package_products: list[str] = Field(default_factory=list)
    linked_products: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)


class ProjectFacts(_Facts):
    targets: list[TargetFacts] = Field(default_factory=list)


class WorkspaceFacts(_Facts):
    projects: list[str] = Field(default_factory=list)


class PackageFacts(_Facts):
    name: str
    dependencies: list[str] = Field(default_factory=list)


ProjectLoader = Callable[[Path], ProjectFacts]
PackageLoader = Callable[[Path], PackageFacts]


def load_project_facts(path: Path) -> ProjectFacts:
    return ProjectFacts.model_validate_json(path.read_text(encoding="utf-8"))


def load_workspace_facts(path: Path) -> WorkspaceFacts:
    return WorkspaceFacts.model_validate_json(path.read_text(encoding="utf-8"))


def load_package_facts(path: Path) -> PackageFacts:
    return PackageFacts.model_validate_json(path.read_text(encoding="utf-8"))


def is_project_definition(path: Path) -> bool:
    return path.name.endswith(PROJECT_SUFFIX)


def is_workspace_definition(path: Path) -> bool:
    return path.name.endswith(WORKSPACE_SUFFIX)
