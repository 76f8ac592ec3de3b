"""Shared fixtures: a small on-disk workspace with two projects and two packages.

Layout::

    root/
      Demo.workspace.json          -> App/App.project.json, Lib/Lib.project.json
      App/App.project.json         App (links Lib.framework), AppTests -> App
      App/Sources/main.swift
      App/Assets/                  folder resource of App
      Lib/Lib.project.json         Lib (product Lib.framework, package Core), LibTests -> Lib
      Lib/Sources/Lib.swift
      Packages/Core/package.manifest.json   Core -> Utils
      Packages/Utils/package.manifest.json  Utils
"""

import json
import shutil
import subprocess
from pathlib import Path

import pytest


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("// source\n", encoding="utf-8")
    return path


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def git(cwd: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", *args],
        cwd=cwd, check=True, capture_output=True,
    )


def init_repo(root: Path) -> Path:
    """Commit everything under ``root`` on a fresh ``main`` branch."""
    git(root, "init", "-q")
    git(root, "symbolic-ref", "HEAD", "refs/heads/main")
    git(root, "add", ".")
    git(root, "commit", "-q", "-m", "base")
    return root


@pytest.fixture
def sample_workspace(tmp_path: Path) -> Path:
    root = tmp_path / "root"

    touch(root / "App" / "Sources" / "main.swift")
    (root / "App" / "Assets").mkdir(parents=True)
    touch(root / "App" / "Assets" / "icon.png")
    touch(root / "App" / "Tests" / "AppTests.swift")
    write_json(root / "App" / "App.project.json", {
        "targets": [
            {
                "name": "App",
                "product_name": "App.app",
                "linked_products": ["Lib.framework", "UIKit.framework"],
                "sources": ["Sources/main.swift"],
                "resources": ["Assets"],
            },
            {
                "name": "AppTests",
                "dependencies": ["App"],
                "sources": ["Tests/AppTests.swift"],
            },
        ],
    })

    touch(root / "Lib" / "Sources" / "Lib.swift")
    touch(root / "Lib" / "Tests" / "LibTests.swift")
    write_json(root / "Lib" / "Lib.project.json", {
        "targets": [
            {
                "name": "Lib",
                "product_name": "Lib.framework",
                "package_products": ["Core"],
                "sources": ["Sources/Lib.swift"],
            },
            {
                "name": "LibTests",
                "dependencies": ["Lib"],
                "sources": ["Tests/LibTests.swift"],
            },
        ],
    })

    write_json(root / "Packages" / "Core" / "package.manifest.json", {
        "name": "Core",
        "dependencies": ["Utils"],
    })
    touch(root / "Packages" / "Core" / "Sources" / "Core.swift")
    write_json(root / "Packages" / "Utils" / "package.manifest.json", {"name": "Utils"})
    touch(root / "Packages" / "Utils" / "Sources" / "Utils.swift")

    write_json(root / "Demo.workspace.json", {
        "projects": ["App/App.project.json", "Lib/Lib.project.json"],
    })
    return root
