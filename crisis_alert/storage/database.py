"""
SQLAlchemy-backed storage.

Composes the per-domain repository functions behind the storage interface.
Every call runs in its own short session; ORM rows are converted to schema
objects before the session closes so nothing lazy-loads afterwards.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from crisis_alert.db import database, models, schemas
from crisis_alert.db.repositories import (
    alerts as alerts_repo,
    analytics as analytics_repo,
    incidents as incidents_repo,
    resources as resources_repo,
    users as users_repo,
)
from crisis_alert.storage import seed as seed_data
from crisis_alert.storage.base import Storage

logger = logging.getLogger(__name__)


def _to_schema(schema_cls, row):
    return schema_cls.model_validate(row) if row is not None else None


class DatabaseStorage(Storage):
    def __init__(self, engine=None, create_schema: bool = True, seed: bool = True):
        self.engine = engine if engine is not None else database.engine
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        if create_schema:
            database.init_db(bind=self.engine)
        if seed:
            self._seed_if_empty()

    @contextmanager
    def _session(self, on_conflict: Optional[str] = None) -> Iterator[Session]:
        """
        Short-lived session.

        Constraint violations become ``ValueError(on_conflict)`` when the caller
        names the user-facing conflict, otherwise they are storage faults.
        """
        db = self._sessionmaker()
        try:
            yield db
        except IntegrityError as e:
            db.rollback()
            if on_conflict is not None:
                raise ValueError(on_conflict) from e
            logger.error("database_integrity_error: %s", e.orig)
            raise RuntimeError(f"Database constraint violated: {e.orig}") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("database_storage_error: %s", e)
            raise RuntimeError(f"Database operation failed: {e}") from e
        finally:
            db.close()

    def _seed_if_empty(self) -> None:
        with self._session() as db:
            if db.query(models.User).first() is not None:
                return
            for user in seed_data.mock_users():
                db.add(models.User(**user.model_dump()))
            for incident in seed_data.mock_incidents():
                db.add(models.Incident(**incident.model_dump()))
            for resource in seed_data.mock_resources():
                db.add(models.Resource(**resource.model_dump()))
            db.commit()
        logger.info("database_storage_seeded")

    # Users
    def get_user(self, user_id: str) -> Optional[schemas.UserRecord]:
        with self._session() as db:
            return _to_schema(schemas.UserRecord, users_repo.get_user(db, user_id))

    def get_user_by_username(self, username: str) -> Optional[schemas.UserRecord]:
        with self._session() as db:
            return _to_schema(schemas.UserRecord, users_repo.get_user_by_username(db, username))

    def get_user_by_email(self, email: str) -> Optional[schemas.UserRecord]:
        with self._session() as db:
            return _to_schema(schemas.UserRecord, users_repo.get_user_by_email(db, email))

    def get_users(self, role: Optional[str] = None) -> List[schemas.UserRecord]:
        with self._session() as db:
            return [schemas.UserRecord.model_validate(u) for u in users_repo.get_users(db, role)]

    def create_user(self, user: schemas.UserCreate) -> schemas.UserRecord:
        conflict = f"User '{user.username}' or email '{user.email}' already exists"
        with self._session(on_conflict=conflict) as db:
            return schemas.UserRecord.model_validate(users_repo.create_user(db, user))

    def update_user(self, user_id: str, user: schemas.UserUpdate) -> Optional[schemas.UserRecord]:
        conflict = f"Email '{user.email}' already exists" if user.email else None
        with self._session(on_conflict=conflict) as db:
            return _to_schema(schemas.UserRecord, users_repo.update_user(db, user_id, user))

    # Incidents
    def get_incidents(self) -> List[schemas.Incident]:
        with self._session() as db:
            return [schemas.Incident.model_validate(i) for i in incidents_repo.get_incidents(db)]

    def get_incident(self, incident_id: str) -> Optional[schemas.Incident]:
        with self._session() as db:
            return _to_schema(schemas.Incident, incidents_repo.get_incident(db, incident_id))

    def create_incident(self, incident: schemas.IncidentCreate) -> schemas.Incident:
        with self._session() as db:
            return schemas.Incident.model_validate(incidents_repo.create_incident(db, incident))

    def update_incident(self, incident_id: str, incident: schemas.IncidentUpdate) -> Optional[schemas.Incident]:
        with self._session() as db:
            return _to_schema(schemas.Incident, incidents_repo.update_incident(db, incident_id, incident))

    def delete_incident(self, incident_id: str) -> bool:
        with self._session() as db:
            return incidents_repo.delete_incident(db, incident_id)

    # Resources
    def get_resources(self) -> List[schemas.Resource]:
        with self._session() as db:
            return [schemas.Resource.model_validate(r) for r in resources_repo.get_resources(db)]

    def get_resource(self, resource_id: str) -> Optional[schemas.Resource]:
        with self._session() as db:
            return _to_schema(schemas.Resource, resources_repo.get_resource(db, resource_id))

    def create_resource(self, resource: schemas.ResourceCreate) -> schemas.Resource:
        with self._session() as db:
            return schemas.Resource.model_validate(resources_repo.create_resource(db, resource))

    def update_resource(self, resource_id: str, resource: schemas.ResourceUpdate) -> Optional[schemas.Resource]:
        with self._session() as db:
            return _to_schema(schemas.Resource, resources_repo.update_resource(db, resource_id, resource))

    def delete_resource(self, resource_id: str) -> bool:
        with self._session() as db:
            return resources_repo.delete_resource(db, resource_id)

    # Resource allocations
    def get_resource_allocations(self) -> List[schemas.ResourceAllocation]:
        with self._session() as db:
            return [
                schemas.ResourceAllocation.model_validate(a)
                for a in resources_repo.get_resource_allocations(db)
            ]

    def get_resource_allocation(self, allocation_id: str) -> Optional[schemas.ResourceAllocation]:
        with self._session() as db:
            return _to_schema(
                schemas.ResourceAllocation, resources_repo.get_resource_allocation(db, allocation_id)
            )

    def create_resource_allocation(self, allocation: schemas.ResourceAllocationCreate) -> schemas.ResourceAllocation:
        with self._session() as db:
            return schemas.ResourceAllocation.model_validate(
                resources_repo.create_resource_allocation(db, allocation)
            )

    def update_resource_allocation(
        self, allocation_id: str, allocation: schemas.ResourceAllocationUpdate
    ) -> Optional[schemas.ResourceAllocation]:
        with self._session() as db:
            return _to_schema(
                schemas.ResourceAllocation,
                resources_repo.update_resource_allocation(db, allocation_id, allocation),
            )

    # Alerts
    def get_alerts(self) -> List[schemas.Alert]:
        with self._session() as db:
            return [schemas.Alert.model_validate(a) for a in alerts_repo.get_alerts(db)]

    def get_alert(self, alert_id: str) -> Optional[schemas.Alert]:
        with self._session() as db:
            return _to_schema(schemas.Alert, alerts_repo.get_alert(db, alert_id))

    def create_alert(self, alert: schemas.AlertCreate) -> schemas.Alert:
        with self._session() as db:
            return schemas.Alert.model_validate(alerts_repo.create_alert(db, alert))

    def update_alert(self, alert_id: str, alert: schemas.AlertUpdate) -> Optional[schemas.Alert]:
        with self._session() as db:
            return _to_schema(schemas.Alert, alerts_repo.update_alert(db, alert_id, alert))

    # Notifications
    def get_notifications(self, user_id: str) -> List[schemas.Notification]:
        with self._session() as db:
            return [schemas.Notification.model_validate(n) for n in alerts_repo.get_notifications(db, user_id)]

    def create_notification(self, notification: schemas.NotificationCreate) -> schemas.Notification:
        with self._session() as db:
            return schemas.Notification.model_validate(alerts_repo.create_notification(db, notification))

    def mark_notification_read(self, notification_id: str) -> bool:
        with self._session() as db:
            return alerts_repo.mark_notification_read(db, notification_id)

    # Analytics
    def get_analytics(self, analytics_type: Optional[str] = None, period: Optional[str] = None) -> List[schemas.Analytics]:
        with self._session() as db:
            return [
                schemas.Analytics.model_validate(a)
                for a in analytics_repo.get_analytics(db, analytics_type, period)
            ]

    def create_analytics_entry(self, analytics_type: str, data: Dict[str, Any], period: str) -> schemas.Analytics:
        entry = schemas.AnalyticsCreate(type=analytics_type, data=data, period=period)
        with self._session() as db:
            return schemas.Analytics.model_validate(analytics_repo.create_analytics_entry(db, entry))
