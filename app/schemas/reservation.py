"""Reservation and availability schemas"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.reservation import ReservationStatus
from app.schemas.staff import TIME_REGEX


class ReservationCreate(BaseModel):
    """Create reservation request; omit staff_id for no preference"""
    menu_id: UUID
    staff_id: Optional[UUID] = None
    reserved_date: date
    reserved_time: str = Field(pattern=TIME_REGEX)
    notes: Optional[str] = Field(default=None, max_length=500)


class ReservationUpdate(BaseModel):
    """Update reservation request"""
    menu_id: Optional[UUID] = None
    staff_id: Optional[UUID] = None
    reserved_date: Optional[date] = None
    reserved_time: Optional[str] = Field(default=None, pattern=TIME_REGEX)
    notes: Optional[str] = Field(default=None, max_length=500)


class AdminReservationCreate(ReservationCreate):
    """Manual reservation entered by an administrator"""
    customer_id: UUID


class AdminReservationUpdate(ReservationUpdate):
    status: Optional[ReservationStatus] = None


class MenuSummary(BaseModel):
    id: UUID
    name: str
    price: int
    duration: int

    class Config:
        from_attributes = True


class StaffSummary(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class CustomerSummary(BaseModel):
    id: UUID
    name: Optional[str]
    email: str
    phone: Optional[str]

    class Config:
        from_attributes = True


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: UUID
    user_id: UUID
    menu_id: UUID
    staff_id: Optional[UUID]
    reserved_date: date
    reserved_time: str
    status: ReservationStatus
    notes: Optional[str]
    reminder_sent: bool
    menu: MenuSummary
    staff: Optional[StaffSummary]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AdminReservationResponse(ReservationResponse):
    user: CustomerSummary


class AvailabilitySlot(BaseModel):
    """Slot start, whether it can be booked and by whom"""
    time: str
    available: bool
    staff_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class AvailabilityResponse(BaseModel):
    reserved_date: date
    menu_id: UUID
    staff_id: Optional[UUID]
    duration: int
    slots: List[AvailabilitySlot] = []
