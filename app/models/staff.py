"""Staff, shift and vacation models"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Boolean, Date, DateTime, ForeignKey, Enum, Text, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class DayOfWeek(str, enum.Enum):
    """Weekday names in date.weekday() order"""
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, day) -> "DayOfWeek":
        return list(cls)[day.weekday()]


class Staff(Base):
    """Staff member who can be booked"""
    __tablename__ = "staff"
    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_staff_tenant_email"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20))
    role = Column(String(100))  # stylist, assistant, ...
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    shifts = relationship("StaffShift", back_populates="staff", cascade="all, delete-orphan")
    vacations = relationship("StaffVacation", back_populates="staff", cascade="all, delete-orphan")


class StaffShift(Base):
    """Recurring weekly working window"""
    __tablename__ = "staff_shifts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), nullable=False)
    staff_id = Column(Uuid, ForeignKey("staff.id"), nullable=False)
    day_of_week = Column(Enum(DayOfWeek), nullable=False)
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    staff = relationship("Staff", back_populates="shifts")


class StaffVacation(Base):
    """Date range during which a staff member is unavailable"""
    __tablename__ = "staff_vacations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), nullable=False)
    staff_id = Column(Uuid, ForeignKey("staff.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    staff = relationship("Staff", back_populates="vacations")
