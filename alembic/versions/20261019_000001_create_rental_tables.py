"""Create rental tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Creates users, apartments, leases, invitation_links, charges and payments,
including the filtered unique indexes behind the one-active-lease and
one-pending-invitation rules.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_ONLY = sa.text("status = 'active'")
PENDING_ONLY = sa.text("status = 'pending'")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables and indexes."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column(
            'role',
            sa.Enum('owner', 'tenant', name='user_role', create_constraint=True),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'apartments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('address', sa.String(200), nullable=False),
        sa.Column('owner_id', sa.String(36), nullable=False),
        sa.Column('created_by', sa.String(36), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_apartments_owner_id'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_apartments_created_by'),
    )
    op.create_index('ix_apartments_owner_id', 'apartments', ['owner_id'])

    op.create_table(
        'leases',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('apartment_id', sa.String(36), nullable=False),
        sa.Column('tenant_id', sa.String(36), nullable=False),
        sa.Column(
            'status',
            sa.Enum('active', 'archived', name='lease_status', create_constraint=True),
            nullable=False,
        ),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('archived_at', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.String(36), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['apartment_id'],
            ['apartments.id'],
            name='fk_leases_apartment_id',
            ondelete='NO ACTION',  # Apartments with lease history cannot be deleted
        ),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_leases_tenant_id'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_leases_created_by'),
    )
    op.create_index('ix_leases_apartment_id', 'leases', ['apartment_id'])
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])
    op.create_index(
        'uq_leases_active_apartment',
        'leases',
        ['apartment_id'],
        unique=True,
        sqlite_where=ACTIVE_ONLY,
        postgresql_where=ACTIVE_ONLY,
        mssql_where=ACTIVE_ONLY,
    )
    op.create_index(
        'uq_leases_active_tenant',
        'leases',
        ['tenant_id'],
        unique=True,
        sqlite_where=ACTIVE_ONLY,
        postgresql_where=ACTIVE_ONLY,
        mssql_where=ACTIVE_ONLY,
    )

    op.create_table(
        'invitation_links',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('apartment_id', sa.String(36), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'accepted', 'expired', name='invitation_status', create_constraint=True),
            nullable=False,
        ),
        sa.Column('created_by', sa.String(36), nullable=False),
        sa.Column('accepted_by', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['apartment_id'],
            ['apartments.id'],
            name='fk_invitation_links_apartment_id',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_invitation_links_created_by'),
        sa.ForeignKeyConstraint(['accepted_by'], ['users.id'], name='fk_invitation_links_accepted_by'),
    )
    op.create_index('ix_invitation_links_apartment_id', 'invitation_links', ['apartment_id'])
    op.create_index('ix_invitation_links_token', 'invitation_links', ['token'], unique=True)
    op.create_index(
        'uq_invitation_links_pending_apartment',
        'invitation_links',
        ['apartment_id'],
        unique=True,
        sqlite_where=PENDING_ONLY,
        postgresql_where=PENDING_ONLY,
        mssql_where=PENDING_ONLY,
    )

    op.create_table(
        'charges',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('lease_id', sa.String(36), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column(
            'type',
            sa.Enum('rent', 'bill', 'other', name='charge_type', create_constraint=True),
            nullable=False,
        ),
        sa.Column('comment', sa.String(300), nullable=True),
        sa.Column('attachment_path', sa.String(500), nullable=True),
        sa.Column('created_by', sa.String(36), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='ck_charges_amount_positive'),
        sa.ForeignKeyConstraint(
            ['lease_id'],
            ['leases.id'],
            name='fk_charges_lease_id',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_charges_created_by'),
    )
    op.create_index('ix_charges_lease_id', 'charges', ['lease_id'])
    op.create_index('ix_charges_due_date', 'charges', ['due_date'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('charge_id', sa.String(36), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('created_by', sa.String(36), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='ck_payments_amount_positive'),
        sa.ForeignKeyConstraint(
            ['charge_id'],
            ['charges.id'],
            name='fk_payments_charge_id',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_payments_created_by'),
    )
    op.create_index('ix_payments_charge_id', 'payments', ['charge_id'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index('ix_payments_charge_id', table_name='payments')
    op.drop_table('payments')

    op.drop_index('ix_charges_due_date', table_name='charges')
    op.drop_index('ix_charges_lease_id', table_name='charges')
    op.drop_table('charges')

    op.drop_index('uq_invitation_links_pending_apartment', table_name='invitation_links')
    op.drop_index('ix_invitation_links_token', table_name='invitation_links')
    op.drop_index('ix_invitation_links_apartment_id', table_name='invitation_links')
    op.drop_table('invitation_links')

    op.drop_index('uq_leases_active_tenant', table_name='leases')
    op.drop_index('uq_leases_active_apartment', table_name='leases')
    op.drop_index('ix_leases_tenant_id', table_name='leases')
    op.drop_index('ix_leases_apartment_id', table_name='leases')
    op.drop_table('leases')

    op.drop_index('ix_apartments_owner_id', table_name='apartments')
    op.drop_table('apartments')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
