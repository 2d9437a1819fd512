"""Initial schema - lookups, users, cars, bookings, payments and follow-ups

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LOOKUP_TABLES = (
    ('roles', 50),
    ('booking_statuses', 50),
    ('car_statuses', 50),
    ('car_brands', 100),
    ('payment_methods', 50),
)


def _status_column(name: str, values: Sequence[str], enum_name: str) -> sa.Column:
    # Non-native enum: VARCHAR plus a CHECK constraint, same as the ORM models
    return sa.Column(
        name,
        sa.Enum(*values, name=enum_name, native_enum=False, length=50, create_constraint=True),
        nullable=False,
    )


def upgrade() -> None:
    # Lookup tables
    for table_name, length in LOOKUP_TABLES:
        op.create_table(
            table_name,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('name', sa.String(length=length), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name'),
        )

    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=150), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'cars',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        sa.Column('model_name', sa.String(length=100), nullable=False),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('fuel_type', sa.String(length=30), nullable=True),
        sa.Column('transmission', sa.String(length=30), nullable=True),
        sa.Column('seats', sa.Integer(), nullable=True),
        sa.Column('daily_rate', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('status_id', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['brand_id'], ['car_brands.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['status_id'], ['car_statuses.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_cars_brand_model_year', 'cars', ['brand_id', 'model_name', 'year'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('car_id', sa.Integer(), nullable=False),
        sa.Column('pickup_location_id', sa.Integer(), nullable=False),
        sa.Column('dropoff_location_id', sa.Integer(), nullable=False),
        sa.Column('pickup_at', sa.DateTime(), nullable=False),
        sa.Column('dropoff_at', sa.DateTime(), nullable=False),
        sa.Column('status_id', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('booked_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('dropoff_at > pickup_at', name='ck_bookings_dropoff_after_pickup'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['car_id'], ['cars.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['pickup_location_id'], ['locations.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['dropoff_location_id'], ['locations.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['status_id'], ['booking_statuses.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_bookings_car_period', 'bookings', ['car_id', 'pickup_at', 'dropoff_at'])
    op.create_index(op.f('ix_bookings_user_id'), 'bookings', ['user_id'])
    op.create_index(op.f('ix_bookings_car_id'), 'bookings', ['car_id'])
    op.create_index(op.f('ix_bookings_booked_at'), 'bookings', ['booked_at'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('method_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        _status_column('status', ('Success', 'Failed', 'Refunded'), 'payment_status'),
        sa.Column('transaction_id', sa.String(length=64), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['method_id'], ['payment_methods.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_payments_booking_status', 'payments', ['booking_id', 'status'])

    op.create_table(
        'refunds',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('payment_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        _status_column('status', ('Pending', 'Refunded', 'Rejected'), 'refund_status'),
        sa.Column('requested_at', sa.DateTime(), nullable=False),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_refunds_payment_status', 'refunds', ['payment_id', 'status'])
    op.create_index(op.f('ix_refunds_user_id'), 'refunds', ['user_id'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('car_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating_range'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['car_id'], ['cars.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_id', 'user_id', name='uq_reviews_booking_user'),
    )
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'])
    op.create_index(op.f('ix_reviews_car_id'), 'reviews', ['car_id'])

    op.create_table(
        'maintenance_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('car_id', sa.Integer(), nullable=False),
        sa.Column('reported_by_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('reported_at', sa.DateTime(), nullable=False),
        sa.Column('is_resolved', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['car_id'], ['cars.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reported_by_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_maintenance_requests_car_id'), 'maintenance_requests', ['car_id'])
    op.create_index(
        op.f('ix_maintenance_requests_is_resolved'), 'maintenance_requests', ['is_resolved']
    )

    op.create_table(
        'booking_issues',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('issue_type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _status_column('status', ('Open', 'In Progress', 'Resolved', 'Closed'), 'issue_status'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_booking_issues_booking_id'), 'booking_issues', ['booking_id'])
    op.create_index(op.f('ix_booking_issues_user_id'), 'booking_issues', ['user_id'])


def downgrade() -> None:
    op.drop_table('booking_issues')
    op.drop_table('maintenance_requests')
    op.drop_table('reviews')
    op.drop_table('refunds')
    op.drop_table('payments')
    op.drop_table('bookings')
    op.drop_table('cars')
    op.drop_table('users')
    op.drop_table('locations')
    for table_name, _ in reversed(LOOKUP_TABLES):
        op.drop_table(table_name)
