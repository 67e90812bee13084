"""Background job tasks"""

import asyncio
import structlog

from app.jobs.celery_app import celery_app
from app.config import settings
from app.errors import FeatureDisabledError

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


@celery_app.task(name="send_reservation_reminders")
def send_reservation_reminders():
    """Email reminders for tomorrow's reservations"""
    logger.info("Sending reservation reminders", tenant_id=settings.tenant_id)

    async def _send_reminders():
        from app.database import SessionLocal
        from app.repositories import Repositories
        from app.services.feature_flags import FeatureFlagService
        from app.services.notifications import EmailSender
        from app.services.reminders import ReminderDispatcher
        from app.services.time_utils import Clock

        async with SessionLocal() as db:
            repos = Repositories(db)
            dispatcher = ReminderDispatcher(
                repos,
                EmailSender(settings.resend_api_key, settings.email_from),
                FeatureFlagService(repos),
                Clock(settings.tenant_timezone),
            )
            try:
                result = await dispatcher.dispatch(settings.tenant_id)
            except FeatureDisabledError:
                logger.info("Reminder email disabled, skipping", tenant_id=settings.tenant_id)
                return None

            return {
                "sent": result.sent,
                "success": result.success,
                "failure": result.failure,
                "errors": result.errors,
                "timestamp": result.timestamp.isoformat(),
            }

    return run_async(_send_reminders())
