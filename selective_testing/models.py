"""Data models shared by the graph engine, discovery and resolver."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path


def normalize_path(path: str | os.PathLike[str], base_dir: Path | None = None) -> Path:
    """Return an absolute, lexically normalized path.

    Relative paths are anchored at ``base_dir`` (or the current directory).
    Symlinks are not resolved, so the result matches what version control
    reports for the same file.
    """
    p = Path(path).expanduser()
    if not p.is_absolute() and base_dir is not None:
        p = base_dir / p
    return Path(os.path.abspath(p))


def unit_name(path: Path) -> str:
    """Short name of a project/package location: its file name up to the first dot."""
    name = path.name
    return name.split(".", 1)[0] or name


class TargetKind(enum.Enum):
    PROJECT = "project"
    PACKAGE = "package"


@dataclass(frozen=True, order=True)
class TargetIdentity:
    """Canonical key of a build target.

    ``path`` is the project definition file for ``PROJECT`` targets and the
    package root directory for ``PACKAGE`` targets. Equality, hashing and
    ordering only look at ``(path, name)``; ``kind`` is a tag carried along
    for display.
    """
    path: Path
    name: str
    kind: TargetKind = field(default=TargetKind.PROJECT, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalize_path(self.path))

    @classmethod
    def project(cls, project_path: str | os.PathLike[str], target_name: str) -> TargetIdentity:
        return cls(Path(project_path), target_name, TargetKind.PROJECT)

    @classmethod
    def package(cls, package_path: str | os.PathLike[str], product_name: str) -> TargetIdentity:
        return cls(Path(package_path), product_name, TargetKind.PACKAGE)

    @property
    def description(self) -> str:
        return f"{self.path}:{self.name}"

    @property
    def simple_description(self) -> str:
        return f"{unit_name(self.path)}:{self.name}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "path": str(self.path),
            "description": self.simple_description,
        }

    def __str__(self) -> str:
        return self.simple_description


@dataclass(frozen=True)
class PackageMetadata:
    """Facts about one package manifest, as produced by the manifest loader."""
    name: str
    path: Path
    depends_on: frozenset[str] = field(default_factory=frozenset)

    def target_identity(self) -> TargetIdentity:
        return TargetIdentity.package(self.path, self.name)
