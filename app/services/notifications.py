"""Reservation emails sent through Resend"""

import asyncio
from typing import Optional

import resend
import structlog

from app.errors import EmailNotConfiguredError
from app.models.reservation import Reservation
from app.services import email_templates
from app.services.email_templates import ReservationEmailData

logger = structlog.get_logger()


class EmailSender:
    """Thin wrapper over resend.Emails.send"""

    def __init__(self, api_key: str, sender: str):
        self.api_key = api_key
        self.sender = sender

    async def send(self, to: str, subject: str, html: str) -> dict:
        if not self.api_key:
            raise EmailNotConfiguredError()

        resend.api_key = self.api_key
        params = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        response = await asyncio.to_thread(resend.Emails.send, params)
        logger.info("Email sent", to=to, subject=subject)
        return response


def email_data(reservation: Reservation, store_name: Optional[str]) -> ReservationEmailData:
    user = reservation.user
    menu = reservation.menu
    return ReservationEmailData(
        customer_name=user.name or user.email,
        customer_email=user.email,
        store_name=store_name or "",
        menu_name=menu.name,
        menu_price=menu.price,
        duration=menu.duration,
        staff_name=reservation.staff.name if reservation.staff else None,
        reserved_date=reservation.reserved_date.isoformat(),
        reserved_time=reservation.reserved_time,
        notes=reservation.notes,
    )


class ReservationNotifier:
    """Best-effort lifecycle emails: failures are logged, never raised"""

    def __init__(self, sender: EmailSender):
        self.sender = sender

    async def _deliver(self, kind: str, reservation: Reservation, subject: str, html: str) -> bool:
        try:
            await self.sender.send(reservation.user.email, subject, html)
            return True
        except Exception as e:
            logger.error(
                "Failed to send reservation email",
                kind=kind,
                reservation_id=str(reservation.id),
                error=str(e),
            )
            return False

    async def confirmed(self, reservation: Reservation, store_name: Optional[str]) -> bool:
        subject, html = email_templates.confirmation_email(email_data(reservation, store_name))
        return await self._deliver("confirmation", reservation, subject, html)

    async def updated(self, reservation: Reservation, store_name: Optional[str], previous_date: str, previous_time: str) -> bool:
        subject, html = email_templates.update_email(
            email_data(reservation, store_name), previous_date, previous_time
        )
        return await self._deliver("update", reservation, subject, html)

    async def cancelled(self, reservation: Reservation, store_name: Optional[str]) -> bool:
        subject, html = email_templates.cancellation_email(email_data(reservation, store_name))
        return await self._deliver("cancellation", reservation, subject, html)
