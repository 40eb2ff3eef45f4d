"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()'))


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def _user_fk(name):
    return sa.Column(name, postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        _uuid_pk(),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('google_access_token', sa.Text(), nullable=True),
        sa.Column('google_refresh_token', sa.Text(), nullable=True),
        sa.Column('google_token_expiry', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'session_tokens',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_id', sa.String(length=64), nullable=False),
        sa.Column('token_hash', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('token_id', name='uq_session_tokens_token_id'),
    )
    op.create_index('idx_session_tokens_user_created', 'session_tokens', ['user_id', 'created_at'], unique=False)

    op.create_table(
        'brand_assets',
        _uuid_pk(),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.String(length=2000), nullable=True),
        sa.Column('category', sa.String(length=40), nullable=False),
        sa.Column('section', sa.String(length=20), nullable=False, server_default='other'),
        sa.Column('preview_url', sa.Text(), nullable=True),
        sa.Column('preview_storage_path', sa.Text(), nullable=True),
        sa.Column('preview_type', sa.String(length=10), nullable=False, server_default='image'),
        sa.Column('page_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('tags', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _user_fk('created_by'),
        _user_fk('updated_by'),
        *_timestamps(),
    )
    op.create_index('idx_brand_assets_section_category_order', 'brand_assets', ['section', 'category', 'order_index'], unique=False)

    op.create_table(
        'asset_files',
        _uuid_pk(),
        sa.Column('asset_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('brand_assets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_type', sa.String(length=10), nullable=False),
        sa.Column('file_url', sa.Text(), nullable=False),
        sa.Column('storage_path', sa.Text(), nullable=True),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )
    op.create_index('ix_asset_files_asset_id', 'asset_files', ['asset_id'], unique=False)

    op.create_table(
        'color_palettes',
        _uuid_pk(),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('category', name='uq_color_palettes_category'),
    )

    op.create_table(
        'palette_colors',
        _uuid_pk(),
        sa.Column('palette_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('color_palettes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('hex', sa.String(length=7), nullable=False),
        sa.Column('rgb', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('cmyk', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('pantone', sa.String(length=100), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_palette_colors_palette_id', 'palette_colors', ['palette_id'], unique=False)

    op.create_table(
        'content_sections',
        _uuid_pk(),
        sa.Column('section', sa.String(length=40), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('section', name='uq_content_sections_section'),
    )

    op.create_table(
        'brand_config',
        _uuid_pk(),
        sa.Column('key', sa.String(length=40), nullable=False, server_default='general'),
        sa.Column('homepage_hero_image_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('brand_assets.id', ondelete='SET NULL'), nullable=True),
        sa.Column('homepage_hero_image_url', sa.Text(), nullable=True),
        sa.Column('description', sa.String(length=2000), nullable=True),
        sa.Column('settings', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        _user_fk('updated_by'),
        *_timestamps(),
        sa.UniqueConstraint('key', name='uq_brand_config_key'),
    )

    op.create_table(
        'brand_templates',
        _uuid_pk(),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('template_type', sa.String(length=20), nullable=False, server_default='other'),
        sa.Column('external_link', sa.Text(), nullable=True),
        sa.Column('file_url', sa.Text(), nullable=True),
        sa.Column('storage_path', sa.Text(), nullable=True),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('preview_url', sa.Text(), nullable=True),
        sa.Column('preview_storage_path', sa.Text(), nullable=True),
        sa.Column('preview_type', sa.String(length=10), nullable=False, server_default='image'),
        sa.Column('tags', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _user_fk('created_by'),
        _user_fk('updated_by'),
        *_timestamps(),
    )

    op.create_table(
        'brand_tools',
        _uuid_pk(),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('html_code', sa.Text(), nullable=False, server_default=''),
        sa.Column('css_code', sa.Text(), nullable=False, server_default=''),
        sa.Column('js_code', sa.Text(), nullable=False, server_default=''),
        sa.Column('preview_url', sa.Text(), nullable=True),
        sa.Column('preview_storage_path', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        _user_fk('created_by'),
        _user_fk('updated_by'),
        *_timestamps(),
    )
    op.create_index('ix_brand_tools_slug', 'brand_tools', ['slug'], unique=True)

    op.create_table(
        'chat_conversations',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False, server_default='New Conversation'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('idx_chat_conversations_user_updated', 'chat_conversations', ['user_id', 'updated_at'], unique=False)

    op.create_table(
        'chat_messages',
        _uuid_pk(),
        sa.Column('conversation_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('chat_conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('tool_calls', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )
    op.create_index('ix_chat_messages_conversation_id', 'chat_messages', ['conversation_id'], unique=False)

    op.create_table(
        'audit_logs',
        _uuid_pk(),
        _user_fk('actor_user_id'),
        sa.Column('action_type', sa.Text(), nullable=False),
        sa.Column('target_type', sa.Text(), nullable=True),
        sa.Column('target_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_audit_logs_actor_user_id_created_at', 'audit_logs', ['actor_user_id', 'created_at'], unique=False)
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_audit_logs_action_type', table_name='audit_logs')
    op.drop_index('ix_audit_logs_actor_user_id_created_at', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('ix_chat_messages_conversation_id', table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_index('idx_chat_conversations_user_updated', table_name='chat_conversations')
    op.drop_table('chat_conversations')
    op.drop_index('ix_brand_tools_slug', table_name='brand_tools')
    op.drop_table('brand_tools')
    op.drop_table('brand_templates')
    op.drop_table('brand_config')
    op.drop_table('content_sections')
    op.drop_index('ix_palette_colors_palette_id', table_name='palette_colors')
    op.drop_table('palette_colors')
    op.drop_table('color_palettes')
    op.drop_index('ix_asset_files_asset_id', table_name='asset_files')
    op.drop_table('asset_files')
    op.drop_index('idx_brand_assets_section_category_order', table_name='brand_assets')
    op.drop_table('brand_assets')
    op.drop_index('idx_session_tokens_user_created', table_name='session_tokens')
    op.drop_table('session_tokens')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
