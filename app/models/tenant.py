"""Tenant-related models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, JSON, Uuid
from sqlalchemy.orm import relationship

from app.database import Base


class Tenant(Base):
    """Booking business served by one installation"""
    __tablename__ = "tenants"

    id = Column(String(50), primary_key=True)  # slug, e.g. "demo-booking"
    name = Column(String(255), nullable=False)
    timezone = Column(String(50), default="Asia/Tokyo")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    settings = relationship("TenantSettings", back_populates="tenant", uselist=False)
    feature_flags = relationship("FeatureFlag", back_populates="tenant", uselist=False)


class TenantSettings(Base):
    """Store hours and booking policy"""
    __tablename__ = "tenant_settings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), unique=True, nullable=False)

    # Store information
    store_name = Column(String(255))
    store_email = Column(String(255))
    store_phone = Column(String(20))

    # Opening hours ("HH:MM")
    open_time = Column(String(5), default="09:00")
    close_time = Column(String(5), default="20:00")
    closed_days = Column(JSON, default=list)  # ["SUNDAY", ...]

    # Booking policy
    slot_duration = Column(Integer, default=30)
    cancellation_deadline_hours = Column(Integer, default=24)
    require_confirmation = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="settings")


class FeatureFlag(Base):
    """Per-tenant feature switches"""
    __tablename__ = "feature_flags"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), unique=True, nullable=False)

    enable_staff_selection = Column(Boolean, default=False, nullable=False)
    enable_staff_shift_management = Column(Boolean, default=False, nullable=False)
    enable_customer_management = Column(Boolean, default=False, nullable=False)
    enable_reservation_update = Column(Boolean, default=False, nullable=False)
    enable_reminder_email = Column(Boolean, default=False, nullable=False)
    enable_manual_reservation = Column(Boolean, default=False, nullable=False)
    enable_analytics_report = Column(Boolean, default=False, nullable=False)
    enable_repeat_rate_analysis = Column(Boolean, default=False, nullable=False)
    enable_coupon_feature = Column(Boolean, default=False, nullable=False)
    enable_line_notification = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="feature_flags")
