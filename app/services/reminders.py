"""Reminder dispatch for tomorrow's reservations"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List

import structlog

from app.services import email_templates
from app.services.notifications import EmailSender, email_data
from app.services.time_utils import Clock

logger = structlog.get_logger()


@dataclass
class ReminderResult:
    sent: int = 0
    success: int = 0
    failure: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ReminderDispatcher:
    """
    Sends one reminder per reservation dated tomorrow.

    Each reservation is its own unit of work: send, then set reminder_sent and
    commit. A failure is recorded and the batch continues. Rows already
    flagged are never selected again, so re-running the job is safe.
    """

    def __init__(self, repos, sender: EmailSender, flags, clock: Clock):
        self.repos = repos
        self.sender = sender
        self.flags = flags
        self.clock = clock

    async def dispatch(self, tenant_id: str) -> ReminderResult:
        await self.flags.ensure_enabled(tenant_id, "enable_reminder_email")

        tomorrow = self.clock.tomorrow()
        store = await self.repos.settings.get_or_create(tenant_id)
        reservations = await self.repos.reservations.due_for_reminder(tenant_id, tomorrow)

        result = ReminderResult(sent=len(reservations))
        logger.info(
            "Dispatching reservation reminders",
            tenant_id=tenant_id,
            date=tomorrow.isoformat(),
            count=len(reservations),
        )

        store_name = store.store_name
        for reservation_id in [r.id for r in reservations]:
            try:
                reservation = await self.repos.reservations.get(tenant_id, reservation_id)
                subject, html = email_templates.reminder_email(email_data(reservation, store_name))
                await self.sender.send(reservation.user.email, subject, html)

                reservation.reminder_sent = True
                await self.repos.commit()

                result.success += 1
                logger.info("Sent reservation reminder", reservation_id=str(reservation_id))

            except Exception as e:
                await self.repos.rollback()
                result.failure += 1
                result.errors.append({"reservation_id": str(reservation_id), "error": str(e)})
                logger.error(
                    "Failed to send reservation reminder",
                    reservation_id=str(reservation_id),
                    error=str(e),
                )

        logger.info(
            "Reservation reminders finished",
            tenant_id=tenant_id,
            success=result.success,
            failure=result.failure,
        )
        return result
