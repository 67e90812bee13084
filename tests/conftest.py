"""Test configuration and fixtures"""

from datetime import date, datetime
from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from app.main import app
from app.config import settings
from app.database import Base, get_db
from app.api.auth import create_access_token, get_password_hash
from app.api.deps import get_clock, get_email_sender
from app.models.tenant import Tenant, TenantSettings
from app.models.user import User, UserRole
from app.models.menu import Menu
from app.models.staff import Staff, StaffShift, DayOfWeek
from app.models.reservation import Reservation, ReservationStatus
from app.repositories import Repositories
from app.services.availability import AvailabilityEngine
from app.services.feature_flags import FeatureFlagService
from app.services.notifications import ReservationNotifier
from app.services.rate_limit import RateLimiter, get_rate_limiter
from app.services.reservations import ReservationService
from app.services.time_utils import Clock


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TENANT_ID = settings.tenant_id

# Sunday; tomorrow is Monday 2030-06-03
NOW = datetime(2030, 6, 2, 10, 0)
MONDAY = date(2030, 6, 3)


class FixedClock(Clock):
    """Clock frozen at a given tenant-local time"""

    def __init__(self, now: datetime = NOW):
        super().__init__(settings.tenant_timezone)
        self.fixed = now

    def now(self) -> datetime:
        return self.fixed


class RecordingSender:
    """Email sender that records messages instead of calling Resend"""

    def __init__(self, fail_for: Optional[List[str]] = None):
        self.sent = []
        self.fail_for = set(fail_for or [])

    async def send(self, to: str, subject: str, html: str) -> dict:
        if to in self.fail_for:
            raise RuntimeError(f"delivery to {to} failed")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"email-{len(self.sent)}"}


async def create_schema(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    await create_schema(engine)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
async def test_tenant(test_db):
    """Create the test tenant with default store settings"""
    tenant = Tenant(id=TENANT_ID, name="Test Salon", timezone=settings.tenant_timezone)
    test_db.add(tenant)
    await test_db.flush()

    test_db.add(TenantSettings(
        tenant_id=TENANT_ID,
        store_name="Test Salon",
        open_time="09:00",
        close_time="20:00",
        closed_days=[],
        slot_duration=30,
        cancellation_deadline_hours=24,
        require_confirmation=False,
    ))
    await test_db.commit()
    return tenant


@pytest.fixture
async def enable_flags(test_db, test_tenant):
    """Turn on the named flags; everything else stays off"""
    async def _enable(*keys):
        repos = Repositories(test_db)
        await FeatureFlagService(repos).update_flags(TENANT_ID, {key: True for key in keys})

    return _enable


async def make_user(db, email: str, role: UserRole = UserRole.CUSTOMER, name: str = "Test User") -> User:
    user = User(
        id=uuid4(),
        tenant_id=TENANT_ID,
        auth_id=uuid4().hex,
        email=email,
        hashed_password=get_password_hash("testpass123"),
        name=name,
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def test_user(test_db, test_tenant):
    """Create a customer"""
    return await make_user(test_db, "customer@example.com", name="Hanako Yamada")


@pytest.fixture
async def test_admin_user(test_db, test_tenant):
    """Create a store administrator"""
    return await make_user(test_db, "admin@example.com", UserRole.ADMIN, "Store Admin")


@pytest.fixture
async def test_super_admin(test_db, test_tenant):
    return await make_user(test_db, "root@example.com", UserRole.SUPER_ADMIN, "Platform Admin")


@pytest.fixture
async def test_menu(test_db, test_tenant):
    """60 minute cut"""
    menu = Menu(
        tenant_id=TENANT_ID,
        name="Cut",
        description="Shampoo, cut and blow dry",
        price=5000,
        duration=60,
        category="Cut",
        is_active=True,
    )
    test_db.add(menu)
    await test_db.commit()
    return menu


async def make_staff(db, name: str, email: str, shifts=None) -> Staff:
    """Staff member with optional {DayOfWeek: (start, end)} shifts"""
    staff = Staff(tenant_id=TENANT_ID, name=name, email=email, role="stylist", is_active=True)
    db.add(staff)
    await db.flush()
    for day, (start, end) in (shifts or {}).items():
        db.add(StaffShift(
            tenant_id=TENANT_ID,
            staff_id=staff.id,
            day_of_week=day,
            start_time=start,
            end_time=end,
            is_active=True,
        ))
    await db.commit()
    return staff


@pytest.fixture
async def test_staff(test_db, test_tenant):
    """Stylist working Monday 09:00-18:00"""
    return await make_staff(
        test_db, "Sato", "sato@example.com", {DayOfWeek.MONDAY: ("09:00", "18:00")}
    )


async def make_reservation(db, user, menu, reserved_date, reserved_time, staff=None, status=ReservationStatus.CONFIRMED) -> Reservation:
    reservation = Reservation(
        tenant_id=TENANT_ID,
        user_id=user.id,
        user=user,
        menu_id=menu.id,
        menu=menu,
        staff_id=staff.id if staff else None,
        staff=staff,
        reserved_date=reserved_date,
        reserved_time=reserved_time,
        status=status,
        reminder_sent=False,
    )
    db.add(reservation)
    await db.commit()
    return reservation


def build_service(db, sender, clock) -> ReservationService:
    repos = Repositories(db)
    flags = FeatureFlagService(repos)
    return ReservationService(
        repos, AvailabilityEngine(repos, flags), flags, ReservationNotifier(sender), clock
    )


@pytest.fixture
def service(test_db, sender, clock):
    return build_service(test_db, sender, clock)


@pytest.fixture
async def client(test_db, sender, clock):
    """Create test client with overridden database, email, clock and rate limiter"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: sender
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rate_limiter] = lambda: RateLimiter(None)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client, test_user):
    """Create authenticated test client"""
    token = create_access_token(test_user)
    client.headers["Authorization"] = f"Bearer {token}"
    return client


@pytest.fixture
async def admin_client(client, test_admin_user):
    """Create admin authenticated test client"""
    token = create_access_token(test_admin_user)
    client.headers["Authorization"] = f"Bearer {token}"
    return client
