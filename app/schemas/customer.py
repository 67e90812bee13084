"""Customer management schemas"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.reservation import ReservationStatus


class CustomerListItem(BaseModel):
    id: UUID
    name: Optional[str]
    email: str
    phone: Optional[str]
    visit_count: int
    last_visit_date: Optional[date]
    created_at: datetime


class HistoryItem(BaseModel):
    id: UUID
    reserved_date: date
    reserved_time: str
    status: ReservationStatus
    menu_name: str
    price: int
    staff_name: Optional[str]
    notes: Optional[str]


class CustomerDetail(CustomerListItem):
    memo: Optional[str]
    visit_history: List[HistoryItem]
    reservation_history: List[HistoryItem]


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)


class MemoUpdate(BaseModel):
    memo: Optional[str] = Field(default=None, max_length=500)


class MemoResponse(BaseModel):
    id: UUID
    memo: Optional[str]
