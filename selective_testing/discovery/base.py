"""Shared discovery plumbing: partial results, directory walking, the worker pool."""

from __future__ import annotations

import fnmatch
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, TypeVar

from selective_testing.graph.workspace_info import WorkspaceInfo

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_SKIP_DIRS = [
    ".git", "node_modules", "__pycache__", ".build", "build", "DerivedData",
    "dist", ".venv", "venv", "Pods", "Carthage",
]


@dataclass(frozen=True)
class DiscoveryResult:
    """Partial workspace info for one unit plus the warnings raised while building it."""
    unit: Path
    info: WorkspaceInfo = field(default_factory=WorkspaceInfo)
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnitOutcome:
    """Result of running one unit through the pool: a value or the error it raised."""
    unit: Path
    value: object = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def find_files(
    root: Path,
    match: Callable[[Path], bool],
    skip_dirs: list[str] | None = None,
) -> list[Path]:
    """Recursively list files under ``root`` accepted by ``match``, sorted."""
    skip = DEFAULT_SKIP_DIRS if skip_dirs is None else skip_dirs
    found: list[Path] = []
    for path in sorted(root.rglob("*")):
        if path.is_dir():
            continue
        if _should_skip(path.relative_to(root), skip):
            continue
        if match(path):
            found.append(path)
    return found


def run_units(
    func: Callable[[Path], R],
    units: Iterable[Path],
    max_workers: int | None = None,
) -> list[UnitOutcome]:
    """Run ``func`` on every unit in a thread pool.

    Failures are captured per unit; one bad unit never prevents the others
    from completing. Outcomes come back sorted by unit path regardless of
    completion order.
    """
    units = list(units)
    if not units:
        return []

    outcomes: list[UnitOutcome] = []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="discovery") as pool:
        futures = {pool.submit(func, unit): unit for unit in units}
        for future in as_completed(futures):
            unit = futures[future]
            try:
                outcomes.append(UnitOutcome(unit=unit, value=future.result()))
            except Exception as e:
                outcomes.append(UnitOutcome(unit=unit, error=e))

    outcomes.sort(key=lambda o: str(o.unit))
    return outcomes


def _should_skip(relative: Path, skip_dirs: list[str]) -> bool:
    for part in relative.parts[:-1]:
        for pattern in skip_dirs:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False
