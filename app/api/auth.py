"""Authentication API endpoints"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.api.deps import create_rate_limiter
from app.config import settings
from app.database import get_db
from app.errors import DuplicateRecordError, ForbiddenError, UnauthorizedError
from app.models.security_log import SecurityEventType
from app.models.user import User, UserRole, has_role
from app.repositories.users import UserRepository
from app.schemas.auth import Token, RefreshRequest, RegisterRequest, UserResponse
from app.schemas.common import ApiResponse, ok
from app.services.security_log import log_security_event

logger = structlog.get_logger()

router = APIRouter()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2 scheme; missing tokens are reported through UnauthorizedError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

login_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")
register_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")
logout_rate_limit = create_rate_limiter(limit=20, window_seconds=60, key_prefix="logout")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash password"""
    return pwd_context.hash(password)


def create_access_token(user: User) -> str:
    """Create JWT access token"""
    expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": user.auth_id,
        "tenant_id": user.tenant_id,
        "role": user.role.value,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_refresh_token(user: User) -> str:
    """Create JWT refresh token"""
    expire = datetime.utcnow() + timedelta(days=settings.refresh_token_expire_days)
    payload = {
        "sub": user.auth_id,
        "tenant_id": user.tenant_id,
        "exp": expire,
        "type": "refresh",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, expected_type: str) -> dict:
    """Decode a token of the given type or raise UnauthorizedError"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise UnauthorizedError("Could not validate credentials")

    if payload.get("sub") is None or payload.get("type") != expected_type:
        raise UnauthorizedError("Could not validate credentials")
    if payload.get("tenant_id") != settings.tenant_id:
        raise UnauthorizedError("Token was issued for another tenant")
    return payload


def issue_tokens(user: User) -> Token:
    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)
    user.refresh_token = refresh_token
    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from token"""
    if not token:
        raise UnauthorizedError()

    payload = decode_token(token, "access")
    user = await UserRepository(db).get_by_auth_id(settings.tenant_id, payload["sub"])

    if user is None or not user.is_active:
        raise UnauthorizedError("Could not validate credentials")

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Verify user is active"""
    if not current_user.is_active:
        raise UnauthorizedError("User account is disabled")
    return current_user


@dataclass
class AdminContext:
    """Caller of an admin endpoint"""
    user_id: str
    role: UserRole


async def _authorize(request: Request, token: Optional[str], db: AsyncSession, required: UserRole) -> AdminContext:
    # Header bypass for automated tests, never honoured in production
    if not settings.is_production and settings.skip_auth_in_test:
        user_id = request.headers.get("x-user-id")
        role_header = request.headers.get("x-user-role")
        if user_id and role_header:
            role = UserRole.__members__.get(role_header)
            if role is None or not has_role(role, required):
                await _deny(request, db, user_id, "insufficient role")
                raise ForbiddenError()
            return AdminContext(user_id=user_id, role=role)

    try:
        user = await get_current_user(token, db)
    except UnauthorizedError:
        await _deny(request, db, None, "missing or invalid token")
        raise

    if not user.has_permission(required):
        await _deny(request, db, str(user.id), "insufficient role")
        raise ForbiddenError()

    return AdminContext(user_id=str(user.id), role=user.role)


async def _deny(request: Request, db: AsyncSession, user_id: Optional[str], reason: str) -> None:
    logger.warning("Unauthorized access", path=request.url.path, user_id=user_id, reason=reason)
    await log_security_event(
        db,
        SecurityEventType.UNAUTHORIZED_ACCESS,
        tenant_id=settings.tenant_id,
        request=request,
        user_id=user_id,
        metadata={"path": request.url.path, "reason": reason},
    )


async def require_admin(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> AdminContext:
    """ADMIN or SUPER_ADMIN"""
    return await _authorize(request, token, db, UserRole.ADMIN)


async def require_super_admin(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> AdminContext:
    return await _authorize(request, token, db, UserRole.SUPER_ADMIN)


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=201)
async def register(
    request: Request,
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    _: None = Depends(register_rate_limit),
):
    """Register a customer account"""
    users = UserRepository(db)
    if await users.get_by_email(settings.tenant_id, data.email):
        raise DuplicateRecordError("This email address is already registered")

    user = User(
        tenant_id=settings.tenant_id,
        auth_id=uuid4().hex,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        name=data.name,
        phone=data.phone,
        role=UserRole.CUSTOMER,
        is_active=True,
    )
    users.add(user)
    await db.commit()

    logger.info("User registered", user_id=str(user.id))
    await log_security_event(
        db, SecurityEventType.USER_REGISTER, settings.tenant_id, request, str(user.id), user.email
    )
    return ok(user)


@router.post("/login", response_model=ApiResponse[Token])
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
    _: None = Depends(login_rate_limit),
):
    """Authenticate user and return tokens"""
    user = await UserRepository(db).get_by_email(settings.tenant_id, form_data.username)

    if not user or not verify_password(form_data.password, user.hashed_password):
        await log_security_event(
            db,
            SecurityEventType.LOGIN_FAILED,
            settings.tenant_id,
            request,
            email=form_data.username,
            metadata={"reason": "invalid credentials"},
        )
        raise UnauthorizedError("Incorrect email or password")

    if not user.is_active:
        await log_security_event(
            db,
            SecurityEventType.LOGIN_FAILED,
            settings.tenant_id,
            request,
            user_id=str(user.id),
            email=user.email,
            metadata={"reason": "account disabled"},
        )
        raise UnauthorizedError("User account is disabled")

    # Update last login
    user.last_login = datetime.utcnow()
    token = issue_tokens(user)
    await db.commit()

    await log_security_event(
        db, SecurityEventType.LOGIN_SUCCESS, settings.tenant_id, request, str(user.id), user.email
    )
    return ok(token)


@router.post("/refresh", response_model=ApiResponse[Token])
async def refresh_token(
    request: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Refresh access token using refresh token"""
    payload = decode_token(request.refresh_token, "refresh")
    user = await UserRepository(db).get_by_auth_id(settings.tenant_id, payload["sub"])

    if not user or user.refresh_token != request.refresh_token:
        raise UnauthorizedError("Invalid refresh token")

    # Rotation
    token = issue_tokens(user)
    await db.commit()
    return ok(token)


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user),
):
    """Get current user information"""
    return ok(current_user)


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    _: None = Depends(logout_rate_limit),
):
    """Logout user by invalidating refresh token"""
    current_user.refresh_token = None
    await db.commit()
    await log_security_event(
        db, SecurityEventType.LOGOUT, settings.tenant_id, request, str(current_user.id), current_user.email
    )
    return ok({"message": "Successfully logged out"})
