"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = ('CUSTOMER', 'ADMIN', 'SUPER_ADMIN')
DAYS_OF_WEEK = ('MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY', 'SUNDAY')
RESERVATION_STATUSES = ('PENDING', 'CONFIRMED', 'CANCELLED', 'COMPLETED', 'NO_SHOW')

FEATURE_FLAG_COLUMNS = (
    'enable_staff_selection',
    'enable_staff_shift_management',
    'enable_customer_management',
    'enable_reservation_update',
    'enable_reminder_email',
    'enable_manual_reservation',
    'enable_analytics_report',
    'enable_repeat_rate_analysis',
    'enable_coupon_feature',
    'enable_line_notification',
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Create tenants table
    op.create_table(
        'tenants',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('timezone', sa.String(50), server_default='Asia/Tokyo'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        *_timestamps(),
    )

    # Create tenant_settings table
    op.create_table(
        'tenant_settings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), unique=True, nullable=False),
        sa.Column('store_name', sa.String(255)),
        sa.Column('store_email', sa.String(255)),
        sa.Column('store_phone', sa.String(20)),
        sa.Column('open_time', sa.String(5), server_default='09:00'),
        sa.Column('close_time', sa.String(5), server_default='20:00'),
        sa.Column('closed_days', sa.JSON()),
        sa.Column('slot_duration', sa.Integer(), server_default='30'),
        sa.Column('cancellation_deadline_hours', sa.Integer(), server_default='24'),
        sa.Column('require_confirmation', sa.Boolean(), server_default=sa.false()),
        *_timestamps(),
    )

    # Create feature_flags table
    op.create_table(
        'feature_flags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), unique=True, nullable=False),
        *[
            sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.false())
            for name in FEATURE_FLAG_COLUMNS
        ],
        *_timestamps(),
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('auth_id', sa.String(255), unique=True, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255)),
        sa.Column('phone', sa.String(20)),
        sa.Column('memo', sa.Text()),
        sa.Column('role', sa.Enum(*USER_ROLES, name='userrole'), server_default='CUSTOMER'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'email', name='uq_users_tenant_email'),
    )

    # Create menus table
    op.create_table(
        'menus',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(100)),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        *_timestamps(),
    )

    # Create staff tables
    op.create_table(
        'staff',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20)),
        sa.Column('role', sa.String(100)),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'email', name='uq_staff_tenant_email'),
    )

    op.create_table(
        'staff_shifts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('staff_id', sa.Uuid(), sa.ForeignKey('staff.id'), nullable=False),
        sa.Column('day_of_week', sa.Enum(*DAYS_OF_WEEK, name='dayofweek'), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'staff_vacations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('staff_id', sa.Uuid(), sa.ForeignKey('staff.id'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.Text()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )

    # Create blocked_time_slots table
    op.create_table(
        'blocked_time_slots',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('start_datetime', sa.DateTime(), nullable=False),
        sa.Column('end_datetime', sa.DateTime(), nullable=False),
        sa.Column('reason', sa.String(255)),
        sa.Column('description', sa.Text()),
        *_timestamps(),
    )

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('staff_id', sa.Uuid(), sa.ForeignKey('staff.id')),
        sa.Column('menu_id', sa.Uuid(), sa.ForeignKey('menus.id'), nullable=False),
        sa.Column('reserved_date', sa.Date(), nullable=False),
        sa.Column('reserved_time', sa.String(5), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*RESERVATION_STATUSES, name='reservationstatus'),
            nullable=False,
            server_default='PENDING',
        ),
        sa.Column('notes', sa.Text()),
        sa.Column('reminder_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_reservations_tenant_date', 'reservations', ['tenant_id', 'reserved_date'])

    # Create security_logs table
    op.create_table(
        'security_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.String(50)),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('user_id', sa.String(255)),
        sa.Column('email', sa.String(255)),
        sa.Column('ip_address', sa.String(50)),
        sa.Column('user_agent', sa.Text()),
        sa.Column('metadata', sa.JSON()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('security_logs')
    op.drop_index('ix_reservations_tenant_date', table_name='reservations')
    op.drop_table('reservations')
    op.drop_table('blocked_time_slots')
    op.drop_table('staff_vacations')
    op.drop_table('staff_shifts')
    op.drop_table('staff')
    op.drop_table('menus')
    op.drop_table('users')
    op.drop_table('feature_flags')
    op.drop_table('tenant_settings')
    op.drop_table('tenants')
    for enum_name in ('reservationstatus', 'dayofweek', 'userrole'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
