"""
Role-keyed dashboard aggregates.

Each builder returns the stats, filtered incident lists and chart series one
dashboard renders, so clients never recompute them.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import List, Optional

from crisis_alert.db import schemas
from crisis_alert.db.models import now_utc
from crisis_alert.services.analytics_service import response_time_buckets
from crisis_alert.services.incident_service import incident_matches_agency, organization_members
from crisis_alert.storage import Storage, get_storage

DEFAULT_STATUS_FILTER = ['reported', 'acknowledged', 'in-progress']

PRIORITY_ORDER = {'critical': 4, 'high': 3, 'medium': 2, 'low': 1}

STATUS_CHART = [
    ('reported', 'Reported', '#ef4444'),
    ('acknowledged', 'Acknowledged', '#f97316'),
    ('in-progress', 'In Progress', '#eab308'),
    ('resolved', 'Resolved', '#22c55e'),
]

PRIORITY_CHART = [
    ('critical', 'Critical', '#dc2626'),
    ('high', 'High', '#ea580c'),
    ('medium', 'Medium', '#ca8a04'),
    ('low', 'Low', '#16a34a'),
]


def _created_key(incident: schemas.Incident) -> datetime:
    return incident.created_at or datetime.min.replace(tzinfo=now_utc().tzinfo)


def sort_by_priority(incidents: List[schemas.Incident]) -> List[schemas.Incident]:
    # sorted() is stable, so equal priorities keep their incoming order
    return sorted(incidents, key=lambda i: PRIORITY_ORDER.get(i.priority, 0), reverse=True)


def alert_is_active(alert: schemas.Alert, now: Optional[datetime] = None) -> bool:
    return alert.expires_at is None or alert.expires_at > (now or now_utc())


def alert_targets_user(alert: schemas.Alert, user: schemas.User) -> bool:
    if not alert.target_users:
        return True
    return user.role in alert.target_users or user.id in alert.target_users


class DashboardService:
    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or get_storage()

    def active_alerts(self, user: Optional[schemas.User] = None) -> List[schemas.Alert]:
        now = now_utc()
        alerts = [a for a in self.storage.get_alerts() if alert_is_active(a, now)]
        if user is not None:
            alerts = [a for a in alerts if alert_targets_user(a, user)]
        return alerts

    def citizen(self, user: schemas.User) -> schemas.CitizenDashboard:
        incidents = self.storage.get_incidents()
        mine = sorted(
            (i for i in incidents if i.reported_by == user.id),
            key=_created_key,
            reverse=True,
        )
        alerts = self.active_alerts(user)
        return schemas.CitizenDashboard(
            my_incidents=mine,
            active_incidents=sum(1 for i in incidents if i.status != 'resolved'),
            alert_count=len(alerts),
            alerts=alerts,
        )

    def coordinator(self, statuses: Optional[List[str]] = None) -> schemas.CoordinatorDashboard:
        statuses = statuses or DEFAULT_STATUS_FILTER
        incidents = self.storage.get_incidents()
        resources = self.storage.get_resources()

        by_category = Counter(i.category for i in incidents)
        by_status = Counter(i.status for i in incidents)
        by_priority = Counter(i.priority for i in incidents)

        return schemas.CoordinatorDashboard(
            incidents=sort_by_priority([i for i in incidents if i.status in statuses]),
            stats=schemas.CoordinatorStats(
                total_incidents=len(incidents),
                active_incidents=sum(1 for i in incidents if i.status != 'resolved'),
                resolved_incidents=by_status.get('resolved', 0),
                available_resources=sum(1 for r in resources if r.status == 'available'),
            ),
            category_data=[
                schemas.ChartDatum(name=category[:1].upper() + category[1:], value=count)
                for category, count in by_category.items()
            ],
            status_data=[
                schemas.ChartDatum(name=label, value=by_status.get(key, 0), color=color)
                for key, label, color in STATUS_CHART
            ],
            priority_data=[
                schemas.ChartDatum(name=label, value=by_priority.get(key, 0), color=color)
                for key, label, color in PRIORITY_CHART
            ],
            response_time_data=[
                schemas.ChartDatum(name=label, value=count)
                for label, count in response_time_buckets(incidents).items()
            ],
            resources=resources,
            alerts=self.active_alerts(),
        )

    def agency(self, user: schemas.User, statuses: Optional[List[str]] = None) -> schemas.AgencyDashboard:
        statuses = statuses or DEFAULT_STATUS_FILTER
        incidents = self.storage.get_incidents()
        org_user_ids, org_resource_ids = organization_members(self.storage, user.organization)
        org_resources = [r for r in self.storage.get_resources() if r.id in org_resource_ids]

        assigned = [
            i for i in incidents
            if incident_matches_agency(i, user, org_user_ids, org_resource_ids)
        ]
        available = [
            i for i in incidents
            if i.status in ('reported', 'acknowledged') and i.assigned_to != user.id
        ]

        return schemas.AgencyDashboard(
            organization=user.organization,
            assigned_incidents=[i for i in assigned if i.status in statuses],
            available_incidents=available,
            resources=org_resources,
            stats=schemas.AgencyStats(
                assigned_incidents=sum(1 for i in assigned if i.status != 'resolved'),
                available_resources=sum(1 for r in org_resources if r.status == 'available'),
                deployed_resources=sum(1 for r in org_resources if r.status == 'deployed'),
            ),
        )
