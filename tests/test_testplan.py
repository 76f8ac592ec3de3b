"""Tests for test plan rewriting."""

import json

import pytest

from selective_testing.errors import TestPlanError
from selective_testing.models import TargetIdentity
from selective_testing.testplan import enable_tests


@pytest.fixture
def plan(tmp_path):
    path = tmp_path / "App.testplan.json"
    path.write_text(json.dumps({
        "configurations": [{"name": "Default"}],
        "testTargets": [
            {"target": {"name": "AppTests", "containerPath": "App.project.json"}, "enabled": False},
            {"target": {"name": "LibTests", "containerPath": "Lib.project.json"}},
            {"target": {"name": "UITests", "containerPath": "App.project.json"}},
        ],
    }), encoding="utf-8")
    return path


def test_only_affected_targets_stay_enabled(plan):
    targets = [
        TargetIdentity.project("/ws/App.project.json", "AppTests"),
        TargetIdentity.project("/ws/App.project.json", "App"),
    ]
    enabled = enable_tests(plan, targets)
    assert enabled == ["AppTests"]

    data = json.loads(plan.read_text(encoding="utf-8"))
    entries = data["testTargets"]
    assert "enabled" not in entries[0]
    assert entries[1]["enabled"] is False
    assert entries[2]["enabled"] is False
    # Unrelated keys are preserved
    assert data["configurations"] == [{"name": "Default"}]
    assert entries[0]["target"]["containerPath"] == "App.project.json"


def test_no_targets_disables_everything(plan):
    assert enable_tests(plan, []) == []
    entries = json.loads(plan.read_text(encoding="utf-8"))["testTargets"]
    assert all(e["enabled"] is False for e in entries)


def test_missing_plan(tmp_path):
    with pytest.raises(TestPlanError):
        enable_tests(tmp_path / "absent.json", [])


def test_invalid_json(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(TestPlanError):
        enable_tests(path, [])


def test_missing_test_targets(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(json.dumps({"configurations": []}), encoding="utf-8")
    with pytest.raises(TestPlanError):
        enable_tests(path, [])


@pytest.mark.parametrize("entry", ["AppTests", {"target": "AppTests"}, {"enabled": False}])
def test_malformed_entry(tmp_path, entry):
    path = tmp_path / "plan.json"
    original = json.dumps({"testTargets": [{"target": {"name": "LibTests"}}, entry]})
    path.write_text(original, encoding="utf-8")
    with pytest.raises(TestPlanError):
        enable_tests(path, [])
    assert path.read_text(encoding="utf-8") == original
