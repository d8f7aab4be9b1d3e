"""baseline schema - users, plumbers, payrolls, jobs

Revision ID: 001_baseline
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = '001_baseline'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table('plumbers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('commission_rate', sa.Numeric(5, 2), nullable=False, server_default='30'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_plumbers_name', 'plumbers', ['name'])
    op.create_index('ix_plumbers_is_active', 'plumbers', ['is_active'])

    op.create_table('payrolls',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('week_ending_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payrolls_week_ending_date', 'payrolls', ['week_ending_date'], unique=True)
    op.create_index('ix_payrolls_status', 'payrolls', ['status'])

    op.create_table('jobs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('revenue', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('parts_cost', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('outside_labor', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('commission_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('plumber_id', sa.Integer(), nullable=False),
        sa.Column('payroll_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['plumber_id'], ['plumbers.id']),
        sa.ForeignKeyConstraint(['payroll_id'], ['payrolls.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_jobs_date', 'jobs', ['date'])
    op.create_index('ix_jobs_plumber_id', 'jobs', ['plumber_id'])
    op.create_index('ix_jobs_payroll_id', 'jobs', ['payroll_id'])


def downgrade():
    op.drop_table('jobs')
    op.drop_table('payrolls')
    op.drop_table('plumbers')
    op.drop_table('users')
