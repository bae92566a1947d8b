"""initial schema: references, users, ticket copies, referrals

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _ticket_columns():
    # Shared by ticket_history and event_attendees
    return [
        sa.Column('uid', sa.String(length=128), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('phone_number', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('ticket_type', sa.String(length=128)),
        sa.Column('ticket_reference', sa.String(length=64), nullable=False),
        sa.Column('purchase_date', sa.String(length=16), nullable=False),
        sa.Column('purchase_time', sa.String(length=16), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('payment_method', sa.String(length=32), nullable=False),
        sa.Column('original_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('ticket_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('transaction_fee', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('discount_applied', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('discount_code', sa.String(length=64)),
        sa.Column('referral_code', sa.String(length=64)),
        sa.Column('referral_name', sa.String(length=128)),
        sa.Column('event_venue', sa.String(length=255)),
        sa.Column('event_type', sa.String(length=64)),
        sa.Column('event_date', sa.String(length=32)),
        sa.Column('event_end_date', sa.String(length=32)),
        sa.Column('event_start', sa.String(length=32)),
        sa.Column('event_end', sa.String(length=32)),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table('payment_references',
        sa.Column('reference', sa.String(length=64), primary_key=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('vendor', sa.String(length=64)),
        sa.Column('user_id', sa.String(length=128)),
        sa.Column('event_id', sa.String(length=128)),
        sa.Column('event_creator_id', sa.String(length=128)),
        sa.Column('event_name', sa.String(length=255)),
        sa.Column('ticket_type', sa.String(length=128)),
        sa.Column('ticket_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('transaction_fee', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('discount_code', sa.String(length=64)),
        sa.Column('discount_data', sa.JSON()),
        sa.Column('referral_code', sa.String(length=64)),
        sa.Column('referral_name', sa.String(length=128)),
        sa.Column('event_venue', sa.String(length=255)),
        sa.Column('event_type', sa.String(length=64)),
        sa.Column('event_date', sa.String(length=32)),
        sa.Column('event_end_date', sa.String(length=32)),
        sa.Column('event_start', sa.String(length=32)),
        sa.Column('event_end', sa.String(length=32)),
        sa.Column('booker_name', sa.String(length=255)),
        sa.Column('booker_email', sa.String(length=255)),
        sa.Column('ticket_id', sa.String(length=32), unique=True),
        sa.Column('ticket_id_generated_at', sa.DateTime()),
        sa.Column('ticket_generated', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('ticket_generated_at', sa.DateTime()),
        sa.Column('payment_event', sa.String(length=64)),
        sa.Column('transaction_type', sa.String(length=64)),
        sa.Column('amount', sa.Float()),
        sa.Column('currency', sa.String(length=8)),
        sa.Column('customer_email', sa.String(length=255)),
        sa.Column('customer_code', sa.String(length=64)),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime()),
    )
    op.create_table('users',
        sa.Column('id', sa.String(length=128), primary_key=True),
        sa.Column('full_name', sa.String(length=255)),
        sa.Column('username', sa.String(length=128)),
        sa.Column('email', sa.String(length=255)),
        sa.Column('phone_number', sa.String(length=32)),
    )
    op.create_table('ticket_history',
        sa.Column('user_id', sa.String(length=128), primary_key=True),
        sa.Column('ticket_id', sa.String(length=32), primary_key=True),
        sa.Column('event_id', sa.String(length=128)),
        sa.Column('event_name', sa.String(length=255)),
        sa.Column('event_creator_id', sa.String(length=128)),
        *_ticket_columns(),
    )
    op.create_table('event_attendees',
        sa.Column('event_id', sa.String(length=128), primary_key=True),
        sa.Column('ticket_id', sa.String(length=32), primary_key=True),
        sa.Column('event_creator_id', sa.String(length=128)),
        *_ticket_columns(),
    )
    op.create_table('admin_event_tickets',
        sa.Column('event_id', sa.String(length=128), primary_key=True),
        sa.Column('ticket_id', sa.String(length=32), primary_key=True),
        sa.Column('reference', sa.String(length=64), nullable=False),
        sa.Column('uid', sa.String(length=128), nullable=False),
        sa.Column('ticket_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('ticket_type', sa.String(length=128)),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('purchase_date', sa.String(length=16), nullable=False),
        sa.Column('purchase_time', sa.String(length=16), nullable=False),
        sa.Column('event_name', sa.String(length=255)),
        sa.Column('event_creator_id', sa.String(length=128)),
    )
    op.create_table('event_referrals',
        sa.Column('event_creator_id', sa.String(length=128), primary_key=True),
        sa.Column('event_id', sa.String(length=128), primary_key=True),
        sa.Column('code', sa.String(length=128), primary_key=True),
        sa.Column('usages', sa.JSON(), nullable=False),
        sa.Column('total_tickets', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_payment_references_status', 'payment_references', ['status'])
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_ticket_history_ticket_reference', 'ticket_history', ['ticket_reference'])
    op.create_index('ix_event_attendees_ticket_reference', 'event_attendees', ['ticket_reference'])
    op.create_index('ix_event_attendees_event_creator_id', 'event_attendees', ['event_creator_id'])


def downgrade() -> None:
    op.drop_table('event_referrals')
    op.drop_table('admin_event_tickets')
    op.drop_table('event_attendees')
    op.drop_table('ticket_history')
    op.drop_table('users')
    op.drop_table('payment_references')
