"""Database models"""

from app.models.tenant import Tenant, TenantSettings, FeatureFlag
from app.models.user import User, UserRole
from app.models.menu import Menu
from app.models.staff import Staff, StaffShift, StaffVacation, DayOfWeek
from app.models.blocked_time import BlockedTimeSlot
from app.models.reservation import Reservation, ReservationStatus
from app.models.security_log import SecurityLog, SecurityEventType

__all__ = [
    "Tenant",
    "TenantSettings",
    "FeatureFlag",
    "User",
    "UserRole",
    "Menu",
    "Staff",
    "StaffShift",
    "StaffVacation",
    "DayOfWeek",
    "BlockedTimeSlot",
    "Reservation",
    "ReservationStatus",
    "SecurityLog",
    "SecurityEventType",
]
