"""Store settings and feature flag schemas"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from app.models.staff import DayOfWeek
from app.schemas.staff import TIME_REGEX


class StoreSettingsUpdate(BaseModel):
    """Update store settings"""
    store_name: Optional[str] = Field(default=None, max_length=255)
    store_email: Optional[EmailStr] = None
    store_phone: Optional[str] = Field(default=None, max_length=20)
    open_time: Optional[str] = Field(default=None, pattern=TIME_REGEX)
    close_time: Optional[str] = Field(default=None, pattern=TIME_REGEX)
    closed_days: Optional[List[DayOfWeek]] = None
    slot_duration: Optional[int] = Field(default=None, ge=15, le=120)
    cancellation_deadline_hours: Optional[int] = Field(default=None, ge=0, le=24 * 30)
    require_confirmation: Optional[bool] = None


class StoreSettingsResponse(BaseModel):
    """Store settings response"""
    tenant_id: str
    store_name: Optional[str]
    store_email: Optional[str]
    store_phone: Optional[str]
    open_time: str
    close_time: str
    closed_days: List[DayOfWeek]
    slot_duration: int
    cancellation_deadline_hours: int
    require_confirmation: bool
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class FeatureFlags(BaseModel):
    """All ten per-tenant switches"""
    enable_staff_selection: bool = False
    enable_staff_shift_management: bool = False
    enable_customer_management: bool = False
    enable_reservation_update: bool = False
    enable_reminder_email: bool = False
    enable_manual_reservation: bool = False
    enable_analytics_report: bool = False
    enable_repeat_rate_analysis: bool = False
    enable_coupon_feature: bool = False
    enable_line_notification: bool = False


class FeatureFlagsUpdate(BaseModel):
    enable_staff_selection: Optional[bool] = None
    enable_staff_shift_management: Optional[bool] = None
    enable_customer_management: Optional[bool] = None
    enable_reservation_update: Optional[bool] = None
    enable_reminder_email: Optional[bool] = None
    enable_manual_reservation: Optional[bool] = None
    enable_analytics_report: Optional[bool] = None
    enable_repeat_rate_analysis: Optional[bool] = None
    enable_coupon_feature: Optional[bool] = None
    enable_line_notification: Optional[bool] = None
