"""initial schema: users, shops, categories, file_stores

Revision ID: 5b1d0c3e7a21
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '5b1d0c3e7a21'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('roles', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_name', 'users', ['name'])

    op.create_table(
        'shops',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('budget', sa.Float(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('budget >= 0', name='ck_shops_budget_non_negative'),
        sa.ForeignKeyConstraint(
            ['created_by'], ['users.id'], name='fk_shops_created_by_users', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_shops'),
    )
    op.create_index('ix_shops_created_by', 'shops', ['created_by'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('shop_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['shop_id'], ['shops.id'], name='fk_categories_shop_id_shops', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_categories'),
    )
    op.create_index('ix_categories_shop_id', 'categories', ['shop_id'])

    op.create_table(
        'file_stores',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('shop_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('original_name', sa.String(length=255), nullable=False),
        sa.Column('base_path', sa.String(length=255), nullable=False),
        sa.Column('extension', sa.String(length=16), nullable=False),
        sa.Column('content_type', sa.String(length=100), nullable=True),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['shop_id'], ['shops.id'], name='fk_file_stores_shop_id_shops', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_file_stores'),
        sa.UniqueConstraint('name', name='uq_file_stores_name'),
    )
    op.create_index('ix_file_stores_shop_id', 'file_stores', ['shop_id'])


def downgrade():
    op.drop_index('ix_file_stores_shop_id', table_name='file_stores')
    op.drop_table('file_stores')
    op.drop_index('ix_categories_shop_id', table_name='categories')
    op.drop_table('categories')
    op.drop_index('ix_shops_created_by', table_name='shops')
    op.drop_table('shops')
    op.drop_index('ix_users_name', table_name='users')
    op.drop_table('users')
