"""Create properties, units and tenants tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Owner-scoped core records the consistency checker and stats read.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the properties, tenants and units tables."""
    op.create_table(
        'properties',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('landlord_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=False, server_default=''),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('total_units', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_properties_landlord_id', 'properties', ['landlord_id'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('landlord_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('unit_number', sa.String(50), nullable=True),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('deposit_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('move_in_date', sa.Date(), nullable=False),
        sa.Column('lease_end_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_landlord_id', 'tenants', ['landlord_id'])
    op.create_index('ix_tenants_status', 'tenants', ['status'])

    op.create_table(
        'units',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('unit_number', sa.String(50), nullable=False),
        sa.Column('tenant_id', sa.String(36), nullable=True),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'],
            ['properties.id'],
            name='fk_units_property_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id'],
            ['tenants.id'],
            name='fk_units_tenant_id',
            ondelete='SET NULL'
        ),
        sa.UniqueConstraint('property_id', 'unit_number', name='uq_units_property_unit_number'),
    )
    op.create_index('ix_units_property_id', 'units', ['property_id'])


def downgrade() -> None:
    """Drop the core tables."""
    op.drop_index('ix_units_property_id', table_name='units')
    op.drop_table('units')
    op.drop_index('ix_tenants_status', table_name='tenants')
    op.drop_index('ix_tenants_landlord_id', table_name='tenants')
    op.drop_table('tenants')
    op.drop_index('ix_properties_landlord_id', table_name='properties')
    op.drop_table('properties')
