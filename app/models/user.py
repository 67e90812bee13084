"""User model for customers and administrators"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Enum, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class User(Base):
    """Tenant-scoped user profile"""
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50), ForeignKey("tenants.id"), nullable=False)

    # Authentication
    auth_id = Column(String(255), unique=True, nullable=False)  # JWT subject
    email = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    name = Column(String(255))
    phone = Column(String(20))
    memo = Column(Text)  # admin-only note

    # Role
    role = Column(Enum(UserRole), default=UserRole.CUSTOMER)

    # Status
    is_active = Column(Boolean, default=True)

    # Tokens
    refresh_token = Column(String(500))

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reservations = relationship("Reservation", back_populates="user")

    def has_permission(self, required_role: UserRole) -> bool:
        """Check if user has at least the required role level"""
        return has_role(self.role, required_role)


def has_role(role: UserRole, required_role: UserRole) -> bool:
    role_hierarchy = {
        UserRole.CUSTOMER: 1,
        UserRole.ADMIN: 2,
        UserRole.SUPER_ADMIN: 3,
    }
    return role_hierarchy.get(role, 0) >= role_hierarchy.get(required_role, 0)
