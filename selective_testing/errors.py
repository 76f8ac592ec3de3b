"""Exceptions raised by selective-testing."""

from __future__ import annotations


class SelectiveTestingError(Exception):
    """Base class for all selective-testing failures."""


class WorkspaceNotFoundError(SelectiveTestingError):
    """The workspace, project or directory to analyse does not exist."""


class DiscoveryError(SelectiveTestingError):
    """A project or package unit failed to load while running in strict mode."""


class ConfigError(SelectiveTestingError):
    """The override configuration file is unreadable or invalid."""


class ChangesetError(SelectiveTestingError):
    """The changed files could not be computed from version control."""


class TestPlanError(SelectiveTestingError):
    """The test plan is missing or malformed."""

    __test__ = False
