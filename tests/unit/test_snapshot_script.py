from __future__ import annotations

import json
import runpy
from pathlib import Path

from crisis_alert.storage import get_storage

MODULE_GLOBALS = runpy.run_path(Path(__file__).resolve().parents[2] / "scripts" / "generate_analytics_snapshot.py")
MAIN = MODULE_GLOBALS["main"]


def test_snapshot_dry_run_prints_without_storing(capsys):
    exit_code = MAIN(["--dry-run", "--period", "weekly"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["period"] == "weekly"
    assert payload["incident_patterns"]["total"] == 2
    assert set(payload) == {"period", "incident_patterns", "response_time", "resource_utilization"}
    assert get_storage().get_analytics() == []


def test_snapshot_stores_entries(capsys):
    exit_code = MAIN([])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "incident_patterns: stored" in out
    entries = get_storage().get_analytics(period="daily")
    assert len(entries) == 3
