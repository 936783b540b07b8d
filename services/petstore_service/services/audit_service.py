"""Audit trail for order, pet and delivery state changes."""

import uuid
from typing import Optional

from services.petstore_service.models import AuditAction, AuditEntityType, AuditLog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def log_audit(
    db: AsyncSession,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    performed_by: Optional[uuid.UUID] = None,
    old_value: Optional[str] = None,
    new_value: Optional[str] = None,
) -> AuditLog:
    """Log an audit event. Committed with the caller's transaction."""
    audit_log = AuditLog(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        performed_by=performed_by,
        old_value=old_value,
        new_value=new_value,
    )
    db.add(audit_log)
    return audit_log


async def list_audit_logs(
    db: AsyncSession,
    *,
    entity_type: Optional[AuditEntityType] = None,
    entity_id: Optional[uuid.UUID] = None,
    limit: int = 100,
) -> list[AuditLog]:
    query = select(AuditLog)
    if entity_type is not None:
        query = query.where(AuditLog.entity_type == entity_type)
    if entity_id is not None:
        query = query.where(AuditLog.entity_id == entity_id)
    query = query.order_by(AuditLog.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())
