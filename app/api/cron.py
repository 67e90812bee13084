"""Endpoints invoked by the external scheduler"""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header
import structlog

from app.api.deps import get_reminder_dispatcher, get_tenant_id
from app.config import settings
from app.errors import UnauthorizedError
from app.schemas.analytics import ReminderRunResponse
from app.schemas.common import ApiResponse, ok
from app.services.reminders import ReminderDispatcher

logger = structlog.get_logger()

router = APIRouter()


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Bearer CRON_SECRET, compared in constant time"""
    expected = f"Bearer {settings.cron_secret}"
    if not settings.cron_secret or not authorization:
        raise UnauthorizedError("Invalid cron secret")
    if not hmac.compare_digest(authorization.encode(), expected.encode()):
        logger.warning("Rejected cron request")
        raise UnauthorizedError("Invalid cron secret")


@router.get("/send-reminders", response_model=ApiResponse[ReminderRunResponse])
async def send_reminders(
    _: None = Depends(verify_cron_secret),
    tenant_id: str = Depends(get_tenant_id),
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
):
    """Email reminders for tomorrow's reservations"""
    result = await dispatcher.dispatch(tenant_id)
    return ok(result)
