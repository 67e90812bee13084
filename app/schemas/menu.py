"""Menu schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field


class MenuCreate(BaseModel):
    """Create menu request"""
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: int = Field(ge=0)
    duration: int = Field(ge=1, le=24 * 60)
    category: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = True


class MenuUpdate(BaseModel):
    """Update menu request"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=1, le=24 * 60)
    category: Optional[str] = Field(default=None, max_length=100)
    is_active: Optional[bool] = None


class MenuResponse(BaseModel):
    """Menu response"""
    id: UUID
    name: str
    description: Optional[str]
    price: int
    duration: int
    category: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
