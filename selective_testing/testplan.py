"""Enable only the affected test targets in a JSON test plan."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from selective_testing.errors import TestPlanError
from selective_testing.models import TargetIdentity

logger = logging.getLogger(__name__)


def enable_tests(plan_path: Path, targets: Iterable[TargetIdentity]) -> list[str]:
    """Rewrite ``plan_path`` so that only test targets in ``targets`` run.

    Entries of ``testTargets`` are matched by target name. Enabled entries
    drop their ``enabled`` key (the default is enabled), the others get
    ``"enabled": false``. Returns the names of the enabled test targets.
    """
    try:
        plan = json.loads(plan_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise TestPlanError(f"Cannot read test plan {plan_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TestPlanError(f"Test plan {plan_path} is not valid JSON: {e}") from e

    entries = plan.get("testTargets") if isinstance(plan, dict) else None
    if not isinstance(entries, list):
        raise TestPlanError(f"Test plan {plan_path} has no testTargets list")

    names = {t.name for t in targets}
    enabled: list[str] = []
    for entry in entries:
        target = entry.get("target") if isinstance(entry, dict) else None
        if not isinstance(target, dict):
            raise TestPlanError(f"Test plan {plan_path} has a testTargets entry without a target: {entry!r}")
        name = target.get("name")
        if name in names:
            entry.pop("enabled", None)
            enabled.append(name)
        else:
            entry["enabled"] = False

    plan_path.write_text(json.dumps(plan, indent=2) + "\n", encoding="utf-8")
    logger.info("Test plan %s: enabled %d of %d test target(s)", plan_path.name, len(enabled), len(entries))
    return enabled
