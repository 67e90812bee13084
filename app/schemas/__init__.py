"""Pydantic schemas for request/response validation"""

from app.schemas.common import ApiResponse, ErrorBody, Page, ok
from app.schemas.auth import (
    Token,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)
from app.schemas.menu import MenuCreate, MenuUpdate, MenuResponse
from app.schemas.staff import (
    StaffCreate,
    StaffUpdate,
    StaffResponse,
    PublicStaffResponse,
    ShiftInput,
    ShiftReplaceRequest,
    ShiftResponse,
    VacationCreate,
    VacationResponse,
)
from app.schemas.blocked_time import BlockedTimeCreate, BlockedTimeUpdate, BlockedTimeResponse
from app.schemas.reservation import (
    ReservationCreate,
    ReservationUpdate,
    ReservationResponse,
    AdminReservationCreate,
    AdminReservationUpdate,
    AdminReservationResponse,
    AvailabilityResponse,
    AvailabilitySlot,
)
from app.schemas.tenant import (
    StoreSettingsUpdate,
    StoreSettingsResponse,
    FeatureFlags,
    FeatureFlagsUpdate,
)

__all__ = [
    "ApiResponse",
    "ErrorBody",
    "Page",
    "ok",
    "Token",
    "LoginRequest",
    "RefreshRequest",
    "RegisterRequest",
    "UserResponse",
    "MenuCreate",
    "MenuUpdate",
    "MenuResponse",
    "StaffCreate",
    "StaffUpdate",
    "StaffResponse",
    "PublicStaffResponse",
    "ShiftInput",
    "ShiftReplaceRequest",
    "ShiftResponse",
    "VacationCreate",
    "VacationResponse",
    "BlockedTimeCreate",
    "BlockedTimeUpdate",
    "BlockedTimeResponse",
    "ReservationCreate",
    "ReservationUpdate",
    "ReservationResponse",
    "AdminReservationCreate",
    "AdminReservationUpdate",
    "AdminReservationResponse",
    "AvailabilityResponse",
    "AvailabilitySlot",
    "StoreSettingsUpdate",
    "StoreSettingsResponse",
    "FeatureFlags",
    "FeatureFlagsUpdate",
]
