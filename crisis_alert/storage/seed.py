"""
Demo records loaded into a fresh storage when SEED_MOCK_DATA is enabled.
"""
from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import List

from crisis_alert.db import schemas
from crisis_alert.db.models import now_utc
from crisis_alert.utils.passwords import hash_password

MOCK_PASSWORD = "password"


@lru_cache(maxsize=1)
def _mock_password_hash() -> str:
    return hash_password(MOCK_PASSWORD)


def mock_users() -> List[schemas.UserRecord]:
    now = now_utc()
    password = _mock_password_hash()
    return [
        schemas.UserRecord(
            id="1",
            username="citizen1",
            password=password,
            email="citizen@example.com",
            role="citizen",
            name="John Citizen",
            organization=None,
            phone="555-0101",
            created_at=now,
        ),
        schemas.UserRecord(
            id="2",
            username="coordinator1",
            password=password,
            email="coordinator@example.com",
            role="coordinator",
            name="Sarah Coordinator",
            organization="City Emergency Services",
            phone="555-0102",
            created_at=now,
        ),
        schemas.UserRecord(
            id="3",
            username="agency1",
            password=password,
            email="agency@example.com",
            role="agency",
            name="Mike Agency",
            organization="Fire Department",
            phone="555-0103",
            created_at=now,
        ),
    ]


def mock_incidents() -> List[schemas.Incident]:
    now = now_utc()
    return [
        schemas.Incident(
            id="1",
            title="Building Fire",
            description="Commercial building fire on Main Street",
            category="fire",
            severity="high",
            priority="critical",
            status="in-progress",
            location={"lat": 40.7128, "lng": -74.0060, "address": "123 Main St"},
            reported_by="1",
            assigned_to="3",
            images=["https://example.com/fire1.jpg"],
            created_at=now - timedelta(hours=1),
            updated_at=now,
            resolved_at=None,
        ),
        schemas.Incident(
            id="2",
            title="Flood Warning",
            description="Heavy flooding in residential area",
            category="flood",
            severity="medium",
            priority="high",
            status="reported",
            location={"lat": 40.7589, "lng": -73.9851, "address": "456 River Rd"},
            reported_by="1",
            assigned_to=None,
            images=[],
            created_at=now - timedelta(minutes=30),
            updated_at=now,
            resolved_at=None,
        ),
    ]


def mock_resources() -> List[schemas.Resource]:
    now = now_utc()
    return [
        schemas.Resource(
            id="1",
            name="Fire Truck #1",
            type="vehicle",
            category="firefighting",
            quantity=1,
            available=1,
            location={"lat": 40.7128, "lng": -74.0060},
            status="available",
            organization="Fire Department",
            description="Heavy duty fire truck with water tank",
            created_at=now,
            updated_at=now,
        ),
        schemas.Resource(
            id="2",
            name="Medical Team Alpha",
            type="personnel",
            category="medical",
            quantity=5,
            available=5,
            location={"lat": 40.7589, "lng": -73.9851},
            status="available",
            organization="Emergency Medical Services",
            description="Paramedic team with ambulance",
            created_at=now,
            updated_at=now,
        ),
    ]
