#!/usr/bin/env python3
"""
Seed script to create the demo booking tenant
"""

import asyncio
import uuid

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

WEEKDAYS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY")


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from app.config import settings as app_settings
    from app.database import SessionLocal, engine, Base
    from app.models.tenant import Tenant, TenantSettings, FeatureFlag
    from app.models.menu import Menu
    from app.models.staff import Staff, StaffShift, DayOfWeek
    from app.models.user import User, UserRole

    tenant_id = app_settings.tenant_id

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo tenant already exists
        result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo tenant...")

        db.add(Tenant(id=tenant_id, name="Demo Hair Salon", timezone=app_settings.tenant_timezone))
        await db.flush()

        db.add(TenantSettings(
            tenant_id=tenant_id,
            store_name="Demo Hair Salon",
            store_email="info@demo-salon.example",
            store_phone="03-1234-5678",
            open_time="09:00",
            close_time="20:00",
            closed_days=["SUNDAY"],
            slot_duration=30,
            cancellation_deadline_hours=24,
            require_confirmation=False,
        ))

        db.add(FeatureFlag(
            tenant_id=tenant_id,
            enable_staff_selection=True,
            enable_staff_shift_management=True,
            enable_customer_management=True,
            enable_reservation_update=True,
            enable_reminder_email=True,
            enable_manual_reservation=True,
            enable_analytics_report=True,
            enable_repeat_rate_analysis=True,
        ))

        # Users
        db.add(User(
            tenant_id=tenant_id,
            auth_id=uuid.uuid4().hex,
            email="admin@demo-salon.example",
            hashed_password=pwd_context.hash("admin123"),
            name="Store Admin",
            role=UserRole.ADMIN,
            is_active=True,
        ))
        db.add(User(
            tenant_id=tenant_id,
            auth_id=uuid.uuid4().hex,
            email="customer@demo-salon.example",
            hashed_password=pwd_context.hash("customer123"),
            name="Demo Customer",
            phone="090-0000-0000",
            role=UserRole.CUSTOMER,
            is_active=True,
        ))

        print("Creating menus...")

        menus = [
            {"name": "Cut", "description": "Shampoo, cut and blow dry", "price": 5000, "duration": 60, "category": "Cut"},
            {"name": "Color", "description": "Full color with treatment", "price": 8000, "duration": 90, "category": "Color"},
            {"name": "Perm", "description": "Digital perm including cut", "price": 10000, "duration": 120, "category": "Perm"},
        ]
        for menu_data in menus:
            db.add(Menu(tenant_id=tenant_id, is_active=True, **menu_data))

        print("Creating staff and shifts...")

        staff_members = [
            {"name": "Sato", "email": "sato@demo-salon.example", "role": "stylist", "hours": ("09:00", "18:00")},
            {"name": "Suzuki", "email": "suzuki@demo-salon.example", "role": "stylist", "hours": ("11:00", "20:00")},
        ]
        for member in staff_members:
            start, end = member.pop("hours")
            staff = Staff(tenant_id=tenant_id, is_active=True, **member)
            db.add(staff)
            await db.flush()
            for day in WEEKDAYS:
                db.add(StaffShift(
                    tenant_id=tenant_id,
                    staff_id=staff.id,
                    day_of_week=DayOfWeek(day),
                    start_time=start,
                    end_time=end,
                    is_active=True,
                ))

        await db.commit()

        print(f"""
Demo data created successfully!

Tenant: Demo Hair Salon
  ID: {tenant_id}

Users:
  Admin:
    Email: admin@demo-salon.example
    Password: admin123

  Customer:
    Email: customer@demo-salon.example
    Password: customer123

Menus: {len(menus)} created
Staff: {len(staff_members)} created with Monday-Saturday shifts
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
