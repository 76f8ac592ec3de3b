"""Manual override configuration: extra dependencies and manually assigned files.

The configuration lives in a YAML file next to the workspace::

    baseBranch: develop
    testPlan: App.testplan.json
    dependencies:
      App:AppTests: [Shared:Fixtures]
    targetsFiles:
      Lib:
        - Scripts/codegen.sh
        - Generated/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from selective_testing.errors import ConfigError
from selective_testing.graph.dependency_graph import DependencyGraph
from selective_testing.graph.workspace_info import WorkspaceInfo
from selective_testing.models import TargetIdentity, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = ".selective-testing.yml"


class OverrideConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_branch: str | None = Field(default=None, alias="baseBranch")
    test_plan: str | None = Field(default=None, alias="testPlan")
    dependencies: dict[str, list[str]] = Field(default_factory=dict)
    targets_files: dict[str, list[str]] = Field(default_factory=dict, alias="targetsFiles")


@dataclass
class LoadedConfig:
    """An override config together with the directory its relative paths refer to."""
    config: OverrideConfig
    base_dir: Path = field(default_factory=Path.cwd)


def load_config(path: Path) -> LoadedConfig:
    """Read and validate an override YAML file. Any failure is a ``ConfigError``."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        config = OverrideConfig.model_validate(raw or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    return LoadedConfig(config=config, base_dir=normalize_path(path).parent)


def find_default_config(directory: Path) -> Path | None:
    candidate = directory / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def apply_overrides(info: WorkspaceInfo, loaded: LoadedConfig) -> tuple[WorkspaceInfo, list[str]]:
    """Return a new info with the configured edges and files added.

    Every problem (unknown target name, missing path) is reported as a
    warning and only skips the entry it concerns.
    """
    config = loaded.config
    warnings: list[str] = []

    graph = DependencyGraph(info.dependency_structure.depends_on)
    files = {target: set(paths) for target, paths in info.files.items()}
    folders = dict(info.folders)

    def resolve(name: str) -> TargetIdentity | None:
        target = info.find_target(name)
        if target is None:
            warnings.append(f"Config: cannot resolve {name} to any known target")
        return target

    for target_name, depends_on in config.dependencies.items():
        target = resolve(target_name)
        if target is None:
            continue
        for dependency_name in depends_on:
            dependency = resolve(dependency_name)
            if dependency is None:
                continue
            graph.insert(target, dependency)

    for target_name, paths in config.targets_files.items():
        target = resolve(target_name)
        if target is None:
            continue
        for raw_path in paths:
            path = normalize_path(raw_path, loaded.base_dir)
            if not path.exists():
                warnings.append(f"Config: path {path} does not exist")
                continue
            if path.is_dir():
                folders[path] = target
            else:
                files.setdefault(target, set()).add(path)

    logger.debug("Applied overrides with %d warning(s)", len(warnings))
    return WorkspaceInfo(files=files, folders=folders, dependency_structure=graph), warnings
