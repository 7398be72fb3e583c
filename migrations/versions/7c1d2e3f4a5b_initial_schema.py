"""Create users, plans, subscriptions, threat logs and protection status."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c1d2e3f4a5b'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('profile_image_url', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_user'),
        sa.UniqueConstraint('email', name='uq_user_email'),
    )

    op.create_table(
        'subscription_plan',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('tier', sa.String(length=32), nullable=False),
        sa.Column('price_monthly', sa.Integer(), nullable=False),
        sa.Column('price_yearly', sa.Integer(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('max_devices', sa.Integer(), nullable=False),
        sa.Column('is_popular', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_subscription_plan'),
    )

    op.create_table(
        'user_subscription',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('plan_id', sa.String(length=36), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('billing_cycle', sa.String(length=16), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['user.id'],
            name='fk_user_subscription_user_id_user',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['plan_id'], ['subscription_plan.id'],
            name='fk_user_subscription_plan_id_subscription_plan',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_user_subscription'),
        sa.UniqueConstraint('user_id', name='uq_user_subscription_user_id'),
    )

    op.create_table(
        'threat_log',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('head_type', sa.String(length=32), nullable=False),
        sa.Column('threat_level', sa.String(length=16), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('source', sa.String(length=255), nullable=True),
        sa.Column('source_type', sa.String(length=32), nullable=True),
        sa.Column('blocked_content', sa.Text(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('action_taken', sa.Text(), nullable=True),
        sa.Column('detected_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['user_id'], ['user.id'],
            name='fk_threat_log_user_id_user',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_threat_log'),
    )
    op.create_index('ix_threat_log_user_id', 'threat_log', ['user_id'])
    op.create_index('ix_threat_log_detected_at', 'threat_log', ['detected_at'])

    op.create_table(
        'protection_status',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('deepfake_enabled', sa.Boolean(), nullable=False),
        sa.Column('surveillance_enabled', sa.Boolean(), nullable=False),
        sa.Column('containment_enabled', sa.Boolean(), nullable=False),
        sa.Column('last_scan_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('threats_blocked_today', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['user.id'],
            name='fk_protection_status_user_id_user',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_protection_status'),
        sa.UniqueConstraint('user_id', name='uq_protection_status_user_id'),
    )


def downgrade() -> None:
    op.drop_table('protection_status')
    op.drop_index('ix_threat_log_detected_at', table_name='threat_log')
    op.drop_index('ix_threat_log_user_id', table_name='threat_log')
    op.drop_table('threat_log')
    op.drop_table('user_subscription')
    op.drop_table('subscription_plan')
    op.drop_table('user')
