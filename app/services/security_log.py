"""Append-only security event log"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.security_log import SecurityLog, SecurityEventType

logger = structlog.get_logger()


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def log_security_event(
    db: AsyncSession,
    event_type: SecurityEventType,
    tenant_id: Optional[str] = None,
    request: Optional[Request] = None,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    """Persist a security event; failures are logged and never propagate"""
    try:
        db.add(
            SecurityLog(
                tenant_id=tenant_id,
                event_type=event_type.value,
                user_id=user_id,
                email=email,
                ip_address=client_ip(request),
                user_agent=request.headers.get("user-agent") if request else None,
                metadata_json=metadata or {},
            )
        )
        await db.commit()
    except Exception as e:
        logger.warning("Failed to write security log", event_type=event_type.value, error=str(e))
        try:
            await db.rollback()
        except Exception as rollback_error:
            logger.warning("Failed to roll back security log", error=str(rollback_error))
