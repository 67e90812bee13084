"""Security event log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Text, Uuid
import enum

from app.database import Base


class SecurityEventType(str, enum.Enum):
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    USER_REGISTER = "USER_REGISTER"
    LOGOUT = "LOGOUT"
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"


class SecurityLog(Base):
    """Append-only trail of security-relevant events"""
    __tablename__ = "security_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String(50))

    event_type = Column(String(50), nullable=False)

    # Actor information
    user_id = Column(String(255))
    email = Column(String(255))

    # Request context
    ip_address = Column(String(50))
    user_agent = Column(Text)

    metadata_json = Column("metadata", JSON)

    created_at = Column(DateTime, default=datetime.utcnow)
