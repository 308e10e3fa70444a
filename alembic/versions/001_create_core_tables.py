"""Create core tables and the permission catalogue

Revision ID: 001_create_core_tables
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_create_core_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Permission codes to add
PERMISSIONS = [
    {"code": "movies:read", "description": "View movies"},
    {"code": "movies:write", "description": "Create, edit and delete movies"},
    {"code": "modules:read", "description": "View course modules"},
    {"code": "modules:write", "description": "Create, edit and delete course modules"},
    {"code": "departments:read", "description": "View departments"},
    {"code": "departments:write", "description": "Create, edit and delete departments"},
]


def upgrade() -> None:
    """Create the users, tokens, permissions, movies, module_info and department_info tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(length=500), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=60), nullable=False),
        sa.Column('activated', sa.Boolean(), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'tokens',
        sa.Column('hash', sa.String(length=64), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('expiry', sa.DateTime(timezone=True), nullable=False),
        sa.Column('scope', sa.String(length=32), nullable=False),
    )
    op.create_index('ix_tokens_user_id', 'tokens', ['user_id'])
    op.create_index('ix_tokens_expiry', 'tokens', ['expiry'])
    op.create_index('ix_tokens_scope', 'tokens', ['scope'])

    permissions = op.create_table(
        'permissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
    )
    op.create_index('ix_permissions_code', 'permissions', ['code'], unique=True)

    op.create_table(
        'users_permissions',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column(
            'permission_id',
            sa.Integer(),
            sa.ForeignKey('permissions.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )

    op.create_table(
        'movies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('runtime', sa.Integer(), nullable=False),
        sa.Column('genres', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )

    op.create_table(
        'module_info',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('module_name', sa.String(length=500), nullable=False),
        sa.Column('module_duration', sa.Integer(), nullable=False),
        sa.Column('exam_type', sa.String(length=255), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_module_info_module_name', 'module_info', ['module_name'])

    op.create_table(
        'department_info',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('department_name', sa.String(length=500), nullable=False),
        sa.Column('staff_quantity', sa.Integer(), nullable=False),
        sa.Column('department_director', sa.String(length=255), nullable=False),
        sa.Column('module_info_id', sa.Integer(), sa.ForeignKey('module_info.id'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_department_info_department_name', 'department_info', ['department_name'])
    op.create_index('ix_department_info_module_info_id', 'department_info', ['module_info_id'])

    op.bulk_insert(permissions, PERMISSIONS)


def downgrade() -> None:
    """Drop every table created by upgrade(), dependents first."""
    op.drop_table('department_info')
    op.drop_table('module_info')
    op.drop_table('movies')
    op.drop_table('users_permissions')
    op.drop_table('permissions')
    op.drop_table('tokens')
    op.drop_table('users')
