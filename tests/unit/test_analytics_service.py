from datetime import UTC, datetime, timedelta

import pytest

from crisis_alert.db import schemas
from crisis_alert.services.analytics_service import (
    RESPONSE_TIME_BUCKETS,
    AnalyticsService,
    bucket_for,
    resource_utilization,
    response_time_buckets,
)
from crisis_alert.storage import MemStorage

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)


def _incident(incident_id, created, resolved=None, **overrides):
    data = {
        "id": incident_id,
        "title": f"Incident {incident_id}",
        "description": "test",
        "category": "fire",
        "severity": "medium",
        "priority": "medium",
        "status": "resolved" if resolved else "reported",
        "location": {"lat": 0.0, "lng": 0.0},
        "reported_by": "1",
        "created_at": created,
        "updated_at": resolved or created,
        "resolved_at": resolved,
    }
    data.update(overrides)
    return schemas.Incident(**data)


def _resource(resource_id, quantity, available, organization):
    return schemas.Resource(
        id=resource_id,
        name=f"Resource {resource_id}",
        type="equipment",
        category="general",
        quantity=quantity,
        available=available,
        organization=organization,
    )


@pytest.fixture
def mem():
    storage = MemStorage(seed=False)
    for incident in (
        _incident("fast", NOW - timedelta(hours=1), NOW - timedelta(minutes=50)),
        _incident("slow", NOW - timedelta(hours=3), NOW - timedelta(minutes=30), category="flood", priority="high"),
        _incident("old", NOW - timedelta(days=2)),
        _incident("open", NOW - timedelta(minutes=30), category="waste"),
    ):
        storage.incidents[incident.id] = incident
    for resource in (
        _resource("r1", 4, 1, "Fire Department"),
        _resource("r2", 0, 0, "Public Works"),
    ):
        storage.resources[resource.id] = resource
    return storage


@pytest.mark.parametrize(
    "minutes,label",
    [(0, "0-15min"), (14.9, "0-15min"), (15, "15-30min"), (59, "30-60min"),
     (60, "1-2hrs"), (150, "2-4hrs"), (240, "4hrs+"), (10_000, "4hrs+")],
)
def test_bucket_for(minutes, label):
    assert bucket_for(minutes) == label


def test_response_time_buckets_include_every_bucket(mem):
    counts = response_time_buckets(mem.get_incidents())
    assert list(counts) == [label for label, _ in RESPONSE_TIME_BUCKETS]
    assert counts["0-15min"] == 1
    assert counts["2-4hrs"] == 1
    assert sum(counts.values()) == 2


def test_resource_utilization_handles_empty_stock(mem):
    result = resource_utilization(mem.get_resources())
    assert result["total_quantity"] == 4
    assert result["total_available"] == 1
    assert result["utilization"] == 0.75
    assert result["by_organization"]["Public Works"]["utilization"] == 0
    assert resource_utilization([])["utilization"] == 0


def test_compute_snapshot_daily_window(mem):
    snapshot = AnalyticsService(storage=mem).compute_snapshot("daily", now=NOW)

    patterns = snapshot["incident_patterns"]
    assert patterns["total"] == 3
    assert patterns["by_category"] == {"fire": 1, "flood": 1, "waste": 1}
    assert patterns["by_status"] == {"resolved": 2, "reported": 1}

    response = snapshot["response_time"]
    assert response["resolved_count"] == 2
    assert response["average_minutes"] == 80.0


def test_weekly_window_includes_older_incidents(mem):
    snapshot = AnalyticsService(storage=mem).compute_snapshot("weekly", now=NOW)
    assert snapshot["incident_patterns"]["total"] == 4


def test_unknown_period_rejected(mem):
    with pytest.raises(ValueError):
        AnalyticsService(storage=mem).compute_snapshot("yearly", now=NOW)


def test_generate_snapshot_stores_three_entries(mem):
    service = AnalyticsService(storage=mem)
    snapshot = service.generate_snapshot("weekly", actor_user_id="2", now=NOW)

    assert snapshot.period == "weekly"
    assert [e.type for e in snapshot.entries] == ["incident_patterns", "response_time", "resource_utilization"]
    assert len(service.list_analytics()) == 3
    assert len(service.list_analytics(analytics_type="response_time")) == 1
    assert service.list_analytics(period="daily") == []
