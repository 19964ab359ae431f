"""
Resource and resource allocation repository functions.
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from crisis_alert.db import models, schemas


def create_resource(db: Session, resource: schemas.ResourceCreate):
    db_resource = models.Resource(**resource.model_dump())
    db.add(db_resource)
    db.commit()
    db.refresh(db_resource)
    return db_resource


def get_resource(db: Session, resource_id: str):
    return db.query(models.Resource).filter(models.Resource.id == resource_id).first()


def get_resources(db: Session):
    return db.query(models.Resource).order_by(models.Resource.created_at).all()


def update_resource(db: Session, resource_id: str, resource: schemas.ResourceUpdate):
    db_resource = get_resource(db, resource_id)
    if db_resource:
        for key, value in resource.model_dump(exclude_unset=True).items():
            setattr(db_resource, key, value)
        db_resource.updated_at = models.now_utc()
        db.commit()
        db.refresh(db_resource)
    return db_resource


def delete_resource(db: Session, resource_id: str) -> bool:
    """Delete a resource with proper error handling."""
    try:
        db_resource = get_resource(db, resource_id)
        if not db_resource:
            return False
        db.delete(db_resource)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete resource {resource_id}: {str(e)}")


# Allocations
def create_resource_allocation(db: Session, allocation: schemas.ResourceAllocationCreate):
    db_allocation = models.ResourceAllocation(**allocation.model_dump())
    db.add(db_allocation)
    db.commit()
    db.refresh(db_allocation)
    return db_allocation


def get_resource_allocation(db: Session, allocation_id: str):
    return db.query(models.ResourceAllocation).filter(models.ResourceAllocation.id == allocation_id).first()


def get_resource_allocations(db: Session):
    return db.query(models.ResourceAllocation).order_by(models.ResourceAllocation.allocated_at).all()


def update_resource_allocation(db: Session, allocation_id: str, allocation: schemas.ResourceAllocationUpdate):
    db_allocation = get_resource_allocation(db, allocation_id)
    if db_allocation:
        for key, value in allocation.model_dump(exclude_unset=True).items():
            setattr(db_allocation, key, value)
        db.commit()
        db.refresh(db_allocation)
    return db_allocation
