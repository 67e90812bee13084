"""Email templates for reservation notifications"""

from dataclasses import dataclass
from html import escape
from typing import Optional, Tuple


@dataclass
class ReservationEmailData:
    customer_name: str
    customer_email: str
    store_name: str
    menu_name: str
    menu_price: int
    duration: int
    staff_name: Optional[str]
    reserved_date: str
    reserved_time: str
    notes: Optional[str] = None


def _layout(title: str, intro: str, data: ReservationEmailData, footer: str = "") -> str:
    rows = [
        ("Date", data.reserved_date),
        ("Time", data.reserved_time),
        ("Menu", f"{data.menu_name} ({data.duration} min)"),
        ("Price", f"¥{data.menu_price:,}"),
        ("Staff", data.staff_name or "No preference"),
    ]
    if data.notes:
        rows.append(("Notes", data.notes))

    table = "".join(
        f"<tr><th align='left'>{escape(label)}</th><td>{escape(str(value))}</td></tr>"
        for label, value in rows
    )
    return (
        "<html><body style='font-family: sans-serif'>"
        f"<h2>{escape(title)}</h2>"
        f"<p>Dear {escape(data.customer_name)},</p>"
        f"<p>{escape(intro)}</p>"
        f"<table cellpadding='4'>{table}</table>"
        f"<p>{escape(footer)}</p>"
        f"<p>{escape(data.store_name)}</p>"
        "</body></html>"
    )


def confirmation_email(data: ReservationEmailData) -> Tuple[str, str]:
    subject = "[Reservation confirmed] Thank you for your booking"
    html = _layout(
        "Your reservation is confirmed",
        "Thank you for your reservation. Here are the details.",
        data,
        "If you need to change or cancel, please do so from your reservations page.",
    )
    return subject, html


def update_email(data: ReservationEmailData, previous_date: str, previous_time: str) -> Tuple[str, str]:
    subject = "[Reservation updated] Your reservation has been changed"
    html = _layout(
        "Your reservation has been updated",
        f"Your reservation previously on {previous_date} at {previous_time} has been changed.",
        data,
    )
    return subject, html


def cancellation_email(data: ReservationEmailData) -> Tuple[str, str]:
    subject = "[Reservation cancelled] Your reservation has been cancelled"
    html = _layout(
        "Your reservation has been cancelled",
        "The following reservation has been cancelled. We hope to see you again.",
        data,
    )
    return subject, html


def reminder_email(data: ReservationEmailData) -> Tuple[str, str]:
    subject = "[Reminder] Your reservation is tomorrow"
    html = _layout(
        "See you tomorrow",
        "This is a reminder of your reservation tomorrow.",
        data,
        "If you can no longer make it, please cancel from your reservations page.",
    )
    return subject, html
