"""Blocked time slot model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Uuid

from app.database import Base


class BlockedTimeSlot(Base):
    """Tenant-wide interval during which no bookings are accepted"""
    __tablename__ = "blocked_time_slots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), nullable=False)
    start_datetime = Column(DateTime, nullable=False)  # tenant-local wall time
    end_datetime = Column(DateTime, nullable=False)
    reason = Column(String(255))
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
