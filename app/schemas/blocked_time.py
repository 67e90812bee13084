"""Blocked time slot schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field


class BlockedTimeCreate(BaseModel):
    start_datetime: datetime
    end_datetime: datetime
    reason: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)


class BlockedTimeUpdate(BaseModel):
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    reason: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)


class BlockedTimeResponse(BaseModel):
    id: UUID
    start_datetime: datetime
    end_datetime: datetime
    reason: Optional[str]
    description: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
