"""Reservation model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey, Enum, Text, Index, Uuid
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class ReservationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


# Statuses a customer may still edit or cancel
ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class Reservation(Base):
    """Booked slot for one menu with one staff member"""
    __tablename__ = "reservations"
    __table_args__ = (
        Index("ix_reservations_tenant_date", "tenant_id", "reserved_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    staff_id = Column(Uuid, ForeignKey("staff.id"))  # null only on the anonymous calendar
    menu_id = Column(Uuid, ForeignKey("menus.id"), nullable=False)

    # Slot
    reserved_date = Column(Date, nullable=False)
    reserved_time = Column(String(5), nullable=False)  # "HH:MM"

    # Status
    status = Column(Enum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False)

    notes = Column(Text)
    reminder_sent = Column(Boolean, default=False, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="reservations", lazy="selectin")
    staff = relationship("Staff", lazy="selectin")
    menu = relationship("Menu", lazy="selectin")
