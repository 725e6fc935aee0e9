"""Initial cabin operations schema

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

Creates the seven tables:
1. users (bcrypt hash in `password`)
2. cabins (version_id optimistic concurrency counter)
3. stays, issues, cleaning_checklists (cabin child tables)
4. logs, notifications (audit trail)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


ROLES = ("ADMIN", "RECEPTION", "HOUSEKEEPING", "TECHNICAL")
CABIN_STATUSES = ("OCCUPIED", "EMPTY_DIRTY", "EMPTY_CLEAN", "ISSUE_TECH", "ISSUE_CLEAN", "UNDER_MAINTENANCE")
CHECKLIST_STATUSES = ("SUBMITTED", "APPROVED")


def _in(column, values):
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


def upgrade():
    # ==========================================================================
    # 1. USERS
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(_in('role', ROLES), name='ck_users_role'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # ==========================================================================
    # 2. CABINS
    # ==========================================================================
    op.create_table('cabins',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(_in('status', CABIN_STATUSES), name='ck_cabins_status'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    # ==========================================================================
    # 3. CABIN CHILD TABLES
    # ==========================================================================
    op.create_table('stays',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('cabin_id', sa.String(length=36), nullable=False),
        sa.Column('guest_count', sa.Integer(), nullable=False),
        sa.Column('nights', sa.Integer(), nullable=False),
        sa.Column('checkin_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('checkout_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['cabin_id'], ['cabins.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_stays_cabin_id', 'stays', ['cabin_id'], unique=False)
    op.create_index('ix_stays_cabin_active', 'stays', ['cabin_id', 'is_active'], unique=False)

    op.create_table('issues',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('cabin_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['cabin_id'], ['cabins.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_issues_cabin_id', 'issues', ['cabin_id'], unique=False)
    op.create_index('ix_issues_cabin_status', 'issues', ['cabin_id', 'status'], unique=False)

    op.create_table('cleaning_checklists',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('cabin_id', sa.String(length=36), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('filled_by', sa.String(length=36), nullable=True),
        sa.Column('approved_by', sa.String(length=36), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(_in('status', CHECKLIST_STATUSES), name='ck_cleaning_checklists_status'),
        sa.ForeignKeyConstraint(['cabin_id'], ['cabins.id']),
        sa.ForeignKeyConstraint(['filled_by'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_cleaning_checklists_cabin_id', 'cleaning_checklists', ['cabin_id'], unique=False)
    op.create_index('ix_cleaning_checklists_cabin_status', 'cleaning_checklists', ['cabin_id', 'status'], unique=False)

    # ==========================================================================
    # 4. AUDIT TRAIL
    # ==========================================================================
    op.create_table('logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('action', sa.String(length=32), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_logs_user_id', 'logs', ['user_id'], unique=False)
    op.create_index('ix_logs_action', 'logs', ['action'], unique=False)
    op.create_index('ix_logs_created_at', 'logs', ['created_at'], unique=False)

    op.create_table('notifications',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'], unique=False)


def downgrade():
    op.drop_index('ix_notifications_created_at', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_logs_created_at', table_name='logs')
    op.drop_index('ix_logs_action', table_name='logs')
    op.drop_index('ix_logs_user_id', table_name='logs')
    op.drop_table('logs')
    op.drop_index('ix_cleaning_checklists_cabin_status', table_name='cleaning_checklists')
    op.drop_index('ix_cleaning_checklists_cabin_id', table_name='cleaning_checklists')
    op.drop_table('cleaning_checklists')
    op.drop_index('ix_issues_cabin_status', table_name='issues')
    op.drop_index('ix_issues_cabin_id', table_name='issues')
    op.drop_table('issues')
    op.drop_index('ix_stays_cabin_active', table_name='stays')
    op.drop_index('ix_stays_cabin_id', table_name='stays')
    op.drop_table('stays')
    op.drop_table('cabins')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
