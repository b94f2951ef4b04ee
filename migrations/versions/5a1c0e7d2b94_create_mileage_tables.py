"""Create mileage tables

Revision ID: 5a1c0e7d2b94
Revises: 
Create Date: 2026-10-18 09:12:41.528113

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5a1c0e7d2b94'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('odometer_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.String(length=100), nullable=False),
        sa.Column('reading_date', sa.Date(), nullable=False),
        sa.Column('reading_miles', sa.Integer(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('tag', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_odometer_logs_vehicle_date', 'odometer_logs', ['vehicle_id', 'reading_date'], unique=False)

    op.create_table('trip_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('est_miles', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_trip_events_vehicle_dates', 'trip_events', ['vehicle_id', 'start_date', 'end_date'], unique=False)

    op.create_table('vehicles',
        sa.Column('id', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('mpg', sa.Numeric(precision=6, scale=2), nullable=True),
        sa.Column('lease_start', sa.Date(), nullable=True),
        sa.Column('lease_end', sa.Date(), nullable=True),
        sa.Column('annual_allowance', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('overage_rate', sa.Numeric(precision=6, scale=3), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('gas_prices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('station_id', sa.String(length=50), nullable=False),
        sa.Column('price', sa.Numeric(precision=6, scale=3), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_gas_prices_station_id'), 'gas_prices', ['station_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_gas_prices_station_id'), table_name='gas_prices')
    op.drop_table('gas_prices')
    op.drop_table('vehicles')
    op.drop_index('idx_trip_events_vehicle_dates', table_name='trip_events')
    op.drop_table('trip_events')
    op.drop_index('idx_odometer_logs_vehicle_date', table_name='odometer_logs')
    op.drop_table('odometer_logs')
