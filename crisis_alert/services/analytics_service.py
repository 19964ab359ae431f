"""
Analytics aggregation over incidents and resources.

``generate_snapshot`` computes the three analytics series for a period window
and persists them; the helpers are reused by the coordinator dashboard.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from crisis_alert import audit
from crisis_alert.audit import AuditAction
from crisis_alert.db import schemas
from crisis_alert.db.models import now_utc
from crisis_alert.storage import Storage, get_storage

logger = logging.getLogger(__name__)

PERIOD_WINDOWS: Dict[str, timedelta] = {
    'daily': timedelta(days=1),
    'weekly': timedelta(days=7),
    'monthly': timedelta(days=30),
}

# (label, exclusive upper bound in minutes)
RESPONSE_TIME_BUCKETS: List[Tuple[str, Optional[float]]] = [
    ('0-15min', 15),
    ('15-30min', 30),
    ('30-60min', 60),
    ('1-2hrs', 120),
    ('2-4hrs', 240),
    ('4hrs+', None),
]


def response_minutes(incident: schemas.Incident) -> Optional[float]:
    if incident.status != 'resolved' or not incident.resolved_at or not incident.created_at:
        return None
    return max(0.0, (incident.resolved_at - incident.created_at).total_seconds() / 60.0)


def bucket_for(minutes: float) -> str:
    for label, upper in RESPONSE_TIME_BUCKETS:
        if upper is None or minutes < upper:
            return label
    return RESPONSE_TIME_BUCKETS[-1][0]


def response_time_buckets(incidents: Iterable[schemas.Incident]) -> Dict[str, int]:
    """Count resolved incidents per response-time bucket (every bucket present)."""
    counts = {label: 0 for label, _ in RESPONSE_TIME_BUCKETS}
    for incident in incidents:
        minutes = response_minutes(incident)
        if minutes is not None:
            counts[bucket_for(minutes)] += 1
    return counts


def incident_patterns(incidents: Iterable[schemas.Incident]) -> Dict[str, Any]:
    incidents = list(incidents)
    return {
        'total': len(incidents),
        'by_category': dict(Counter(i.category for i in incidents)),
        'by_status': dict(Counter(i.status for i in incidents)),
        'by_priority': dict(Counter(i.priority for i in incidents)),
        'by_severity': dict(Counter(i.severity for i in incidents)),
    }


def response_time(incidents: Iterable[schemas.Incident]) -> Dict[str, Any]:
    incidents = list(incidents)
    minutes = [m for m in (response_minutes(i) for i in incidents) if m is not None]
    return {
        'buckets': response_time_buckets(incidents),
        'average_minutes': round(sum(minutes) / len(minutes), 2) if minutes else 0,
        'resolved_count': len(minutes),
    }


def _utilization(total_quantity: int, total_available: int) -> float:
    if total_quantity <= 0:
        return 0
    return round((total_quantity - total_available) / total_quantity, 4)


def resource_utilization(resources: Iterable[schemas.Resource]) -> Dict[str, Any]:
    resources = list(resources)
    by_org: Dict[str, Dict[str, Any]] = {}
    for resource in resources:
        org = by_org.setdefault(resource.organization, {'total_quantity': 0, 'total_available': 0})
        org['total_quantity'] += resource.quantity
        org['total_available'] += resource.available
    for org in by_org.values():
        org['utilization'] = _utilization(org['total_quantity'], org['total_available'])

    total_quantity = sum(r.quantity for r in resources)
    total_available = sum(r.available for r in resources)
    return {
        'total_quantity': total_quantity,
        'total_available': total_available,
        'utilization': _utilization(total_quantity, total_available),
        'by_organization': by_org,
    }


class AnalyticsService:
    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or get_storage()

    def list_analytics(self, analytics_type: Optional[str] = None, period: Optional[str] = None) -> List[schemas.Analytics]:
        return self.storage.get_analytics(analytics_type=analytics_type, period=period)

    def incidents_in_window(self, period: str, now: Optional[datetime] = None) -> List[schemas.Incident]:
        if period not in PERIOD_WINDOWS:
            raise ValueError(f"Unknown period '{period}'. Expected one of: {', '.join(PERIOD_WINDOWS)}")
        now = now or now_utc()
        since = now - PERIOD_WINDOWS[period]
        return [
            i for i in self.storage.get_incidents()
            if i.created_at is not None and since <= i.created_at <= now
        ]

    def compute_snapshot(self, period: str, now: Optional[datetime] = None) -> Dict[str, Dict[str, Any]]:
        """The three analytics series for ``period`` keyed by analytics type, not stored."""
        incidents = self.incidents_in_window(period, now)
        return {
            'incident_patterns': incident_patterns(incidents),
            'response_time': response_time(incidents),
            'resource_utilization': resource_utilization(self.storage.get_resources()),
        }

    def generate_snapshot(
        self,
        period: str = 'daily',
        actor_user_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> schemas.SnapshotResponse:
        series = self.compute_snapshot(period, now)
        entries = [
            self.storage.create_analytics_entry(analytics_type, data, period)
            for analytics_type, data in series.items()
        ]
        incident_count = series['incident_patterns']['total']
        audit.log(
            action=AuditAction.ANALYTICS_SNAPSHOT,
            target_type="analytics",
            actor_user_id=actor_user_id,
            metadata={"period": period, "incidents": incident_count},
        )
        logger.info("analytics_snapshot: period=%s incidents=%d", period, incident_count)
        return schemas.SnapshotResponse(period=period, entries=entries)
