"""Staff, shift and vacation schemas"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, model_validator

from app.models.staff import DayOfWeek

TIME_REGEX = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"


class StaffCreate(BaseModel):
    """Create staff request"""
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=20)
    role: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = True


class StaffUpdate(BaseModel):
    """Update staff request"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    role: Optional[str] = Field(default=None, max_length=100)
    is_active: Optional[bool] = None


class StaffResponse(BaseModel):
    """Staff response"""
    id: UUID
    name: str
    email: str
    phone: Optional[str]
    role: Optional[str]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PublicStaffResponse(BaseModel):
    """Staff as shown to customers"""
    id: UUID
    name: str
    role: Optional[str]

    class Config:
        from_attributes = True


class ShiftInput(BaseModel):
    day_of_week: DayOfWeek
    start_time: str = Field(pattern=TIME_REGEX)
    end_time: str = Field(pattern=TIME_REGEX)
    is_active: bool = True


class ShiftReplaceRequest(BaseModel):
    """Full weekly schedule of one staff member"""
    shifts: List[ShiftInput]


class ShiftResponse(BaseModel):
    id: UUID
    staff_id: UUID
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    is_active: bool

    class Config:
        from_attributes = True


class VacationCreate(BaseModel):
    start_date: date
    end_date: date
    reason: Optional[str] = Field(default=None, max_length=500)


class VacationResponse(BaseModel):
    id: UUID
    staff_id: UUID
    start_date: date
    end_date: date
    reason: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
