"""selective-testing: find the build targets affected by a set of changed files."""

from __future__ import annotations

__version__ = "0.1.0"
