"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('OWNER', 'ADMIN', name='adminrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.String(length=150), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_admins_id', 'admins', ['id'])
    op.create_index('ix_admins_username', 'admins', ['username'], unique=True)
    op.create_index('ix_admins_created_at', 'admins', ['created_at'])

    op.create_table(
        'admin_activities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('admin_username', sa.String(length=150), nullable=False),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_admin_activities_id', 'admin_activities', ['id'])
    op.create_index('ix_admin_activities_admin_username', 'admin_activities', ['admin_username'])
    op.create_index('ix_admin_activities_created_at', 'admin_activities', ['created_at'])

    op.create_table(
        'webhook_configs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column(
            'type',
            sa.Enum('REACTION', 'COMMENT', 'ORDER', 'USER_BAN', 'DATA_CLEANUP', name='webhooktype'),
            nullable=False,
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('headers', sa.JSON(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_webhook_configs_id', 'webhook_configs', ['id'])
    op.create_index('ix_webhook_configs_type', 'webhook_configs', ['type'])
    op.create_index('ix_webhook_configs_is_active', 'webhook_configs', ['is_active'])
    op.create_index('ix_webhook_configs_created_at', 'webhook_configs', ['created_at'])

    op.create_table(
        'reactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column(
            'reaction_type',
            sa.Enum('LIKE', 'LOVE', 'ANGRY', 'HAHA', 'SAD', 'WOW', name='reactiontype'),
            nullable=False,
        ),
        sa.Column('post_url', sa.String(length=2048), nullable=True),
        sa.Column('post_id', sa.String(length=255), nullable=True),
        sa.Column('action_type', sa.String(length=100), nullable=False, server_default='ADDED'),
        sa.Column('previous_reaction', sa.String(length=50), nullable=True),
        sa.Column('custom_action', sa.String(length=255), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_reactions_id', 'reactions', ['id'])
    op.create_index('ix_reactions_user_id', 'reactions', ['user_id'])
    op.create_index('ix_reactions_post_id', 'reactions', ['post_id'])
    op.create_index('ix_reactions_created_at', 'reactions', ['created_at'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('comment_id', sa.String(length=255), nullable=False),
        sa.Column('post_id', sa.String(length=255), nullable=False),
        sa.Column('post_link', sa.String(length=2048), nullable=True),
        sa.Column('action_type', sa.String(length=100), nullable=False, server_default='ADDED'),
        sa.Column('parent_comment_id', sa.String(length=255), nullable=True),
        sa.Column('reply_to', sa.String(length=255), nullable=True),
        sa.Column('custom_action', sa.String(length=255), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_comments_id', 'comments', ['id'])
    op.create_index('ix_comments_user_id', 'comments', ['user_id'])
    op.create_index('ix_comments_comment_id', 'comments', ['comment_id'])
    op.create_index('ix_comments_post_id', 'comments', ['post_id'])
    op.create_index('ix_comments_parent_comment_id', 'comments', ['parent_comment_id'])
    op.create_index('ix_comments_created_at', 'comments', ['created_at'])

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('number', sa.String(length=64), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('total_product', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('text', sa.Text(), nullable=True),
        sa.Column('sender_id', sa.String(length=255), nullable=False),
        sa.Column('recipient_id', sa.String(length=255), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'CONFIRMED', 'DELIVERED', 'CANCELLED', name='orderstatus'),
            nullable=False,
        ),
        sa.Column('cancel_reason', sa.String(length=255), nullable=True),
        sa.Column('cancel_message', sa.Text(), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_order_id', 'orders', ['order_id'], unique=True)
    op.create_index('ix_orders_sender_id', 'orders', ['sender_id'])
    op.create_index('ix_orders_recipient_id', 'orders', ['recipient_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('brand_name', sa.String(length=255), nullable=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('final_price', sa.Float(), nullable=False),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('product_code', sa.String(length=100), nullable=False),
        sa.Column(
            'status',
            sa.Enum('ACTIVE', 'INACTIVE', 'OUT_OF_STOCK', name='productstatus'),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_product_code', 'products', ['product_code'], unique=True)
    op.create_index('ix_products_status', 'products', ['status'])
    op.create_index('ix_products_created_at', 'products', ['created_at'])

    op.create_table(
        'user_bans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=True),
        sa.Column('ban_type', sa.Enum('REACTION', 'COMMENT', 'ALL', name='bantype'), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('banned_by', sa.String(length=150), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_user_bans_id', 'user_bans', ['id'])
    op.create_index('ix_user_bans_user_id', 'user_bans', ['user_id'])
    op.create_index('ix_user_bans_is_active', 'user_bans', ['is_active'])
    op.create_index('ix_user_bans_created_at', 'user_bans', ['created_at'])


def downgrade() -> None:
    for table in (
        'user_bans', 'products', 'orders', 'comments', 'reactions',
        'webhook_configs', 'admin_activities', 'admins',
    ):
        op.drop_table(table)

    # PostgreSQL keeps enum types after their tables are dropped
    for enum_name in ('bantype', 'productstatus', 'orderstatus', 'reactiontype', 'webhooktype', 'adminrole'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
