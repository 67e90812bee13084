"""Service factories and shared request dependencies"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.database import get_db
from app.errors import RateLimitExceededError
from app.models.security_log import SecurityEventType
from app.repositories import Repositories
from app.services.analytics import AnalyticsService
from app.services.availability import AvailabilityEngine
from app.services.customers import CustomerService
from app.services.feature_flags import FeatureFlagService
from app.services.notifications import EmailSender, ReservationNotifier
from app.services.rate_limit import RateLimiter, get_rate_limiter
from app.services.reminders import ReminderDispatcher
from app.services.reservations import ReservationService
from app.services.security_log import client_ip, log_security_event
from app.services.time_utils import Clock

logger = structlog.get_logger()


def get_tenant_id() -> str:
    """Tenant served by this deployment"""
    return settings.tenant_id


def get_repositories(db: AsyncSession = Depends(get_db)) -> Repositories:
    return Repositories(db)


def get_clock() -> Clock:
    return Clock(settings.tenant_timezone)


def get_email_sender() -> EmailSender:
    return EmailSender(settings.resend_api_key, settings.email_from)


def get_flag_service(repos: Repositories = Depends(get_repositories)) -> FeatureFlagService:
    return FeatureFlagService(repos)


def get_availability_engine(
    repos: Repositories = Depends(get_repositories),
    flags: FeatureFlagService = Depends(get_flag_service),
) -> AvailabilityEngine:
    return AvailabilityEngine(repos, flags)


def get_reservation_service(
    repos: Repositories = Depends(get_repositories),
    engine: AvailabilityEngine = Depends(get_availability_engine),
    flags: FeatureFlagService = Depends(get_flag_service),
    sender: EmailSender = Depends(get_email_sender),
    clock: Clock = Depends(get_clock),
) -> ReservationService:
    return ReservationService(repos, engine, flags, ReservationNotifier(sender), clock)


def get_reminder_dispatcher(
    repos: Repositories = Depends(get_repositories),
    flags: FeatureFlagService = Depends(get_flag_service),
    sender: EmailSender = Depends(get_email_sender),
    clock: Clock = Depends(get_clock),
) -> ReminderDispatcher:
    return ReminderDispatcher(repos, sender, flags, clock)


def get_analytics_service(
    repos: Repositories = Depends(get_repositories),
    flags: FeatureFlagService = Depends(get_flag_service),
    clock: Clock = Depends(get_clock),
) -> AnalyticsService:
    return AnalyticsService(repos, flags, clock)


def get_customer_service(
    repos: Repositories = Depends(get_repositories),
    flags: FeatureFlagService = Depends(get_flag_service),
) -> CustomerService:
    return CustomerService(repos, flags)


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str):
    """
    Create a rate limiter dependency with specific parameters

    Example usage:
        login_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")

        @router.post("/login")
        async def login(..., _: None = Depends(login_rate_limit)):
            ...
    """

    async def rate_limiter(
        request: Request,
        limiter: RateLimiter = Depends(get_rate_limiter),
        db: AsyncSession = Depends(get_db),
    ) -> None:
        ip = client_ip(request) or "unknown"
        allowed, count, retry_after = await limiter.hit(f"rate_limit:{key_prefix}:{ip}", limit, window_seconds)
        if allowed:
            return

        logger.warning("Rate limit exceeded", key_prefix=key_prefix, ip=ip, count=count, limit=limit)
        await log_security_event(
            db,
            SecurityEventType.RATE_LIMIT_EXCEEDED,
            tenant_id=settings.tenant_id,
            request=request,
            metadata={"endpoint": key_prefix, "limit": limit, "window_seconds": window_seconds},
        )
        raise RateLimitExceededError(retry_after)

    return rate_limiter


general_rate_limit = create_rate_limiter(limit=100, window_seconds=60, key_prefix="general")
