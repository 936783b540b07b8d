import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.petstore_service.models import AuditEntityType
from services.petstore_service.schemas import AuditLogResponse
from services.petstore_service.services import audit_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=list[AuditLogResponse])
async def list_audit_logs(
    entity_type: Optional[AuditEntityType] = None,
    entity_id: Optional[uuid.UUID] = None,
    limit: int = Query(100, ge=1, le=500),
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await audit_service.list_audit_logs(
        db, entity_type=entity_type, entity_id=entity_id, limit=limit
    )
