"""Changed files between a base branch and the working tree, via git."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable

from selective_testing.errors import ChangesetError
from selective_testing.models import normalize_path

logger = logging.getLogger(__name__)


def changeset_from_paths(paths: Iterable[str | Path], base_dir: Path | None = None) -> frozenset[Path]:
    """Normalize an explicit list of changed paths; relative ones anchor at ``base_dir``."""
    return frozenset(normalize_path(p, base_dir) for p in paths if str(p).strip())


def git_changeset(repo_dir: Path, base_branch: str) -> frozenset[Path]:
    """Files changed since the merge base with ``base_branch``.

    Includes committed changes on the current branch, uncommitted changes
    and untracked files, as absolute paths.

    Paths are anchored at ``repo_dir`` as given, not at the symlink-resolved
    top level git reports, so they compare equal to paths normalized the
    same way during discovery.
    """
    top_level = _top_level(repo_dir)

    names: set[str] = set()
    names.update(_lines(_git(top_level, "diff", "--name-only", f"{base_branch}...HEAD")))
    names.update(_lines(_git(top_level, "diff", "--name-only", "HEAD")))
    names.update(_lines(_git(top_level, "ls-files", "--others", "--exclude-standard")))

    changeset = changeset_from_paths(names, top_level)
    logger.debug("git reports %d changed file(s) against %s", len(changeset), base_branch)
    return changeset


def _top_level(repo_dir: Path) -> Path:
    # --show-prefix is the path of repo_dir below the top level, e.g. "App/Sources/"
    prefix = _git(repo_dir, "rev-parse", "--show-prefix").strip()
    top_level = normalize_path(repo_dir)
    for _ in Path(prefix).parts:
        top_level = top_level.parent
    return top_level


def _git(cwd: Path, *args: str) -> str:
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise ChangesetError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        raise ChangesetError(
            f"git {' '.join(args)} failed in {cwd}: {e.stderr.strip() or e.returncode}"
        ) from e
    return completed.stdout


def _lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]
