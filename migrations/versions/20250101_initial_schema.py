"""
Initial schema: users, incidents, resources, resource allocations, alerts,
notifications and analytics.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'initial_schema_20250101'
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.Text(), nullable=False),
        sa.Column('password', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='citizen'),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('organization', sa.Text(), nullable=True),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'incidents',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('severity', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(20), nullable=False, server_default='reported'),
        sa.Column('location', _json(), nullable=False),
        sa.Column('reported_by', sa.String(36), nullable=False),
        sa.Column('assigned_to', sa.String(36), nullable=True),
        sa.Column('images', _json(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('idx_incidents_status', 'incidents', ['status'])
    op.create_index('idx_incidents_reported_by', 'incidents', ['reported_by'])
    op.create_index('idx_incidents_assigned_to', 'incidents', ['assigned_to'])

    op.create_table(
        'resources',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('available', sa.Integer(), nullable=False),
        sa.Column('location', _json(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='available'),
        sa.Column('organization', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_resources_organization', 'resources', ['organization'])

    op.create_table(
        'resource_allocations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('resource_id', sa.String(36), nullable=False),
        sa.Column('incident_id', sa.String(36), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('allocated_by', sa.String(36), nullable=False),
        sa.Column('allocated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('returned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='allocated'),
    )
    op.create_index('idx_resource_allocations_resource_id', 'resource_allocations', ['resource_id'])
    op.create_index('idx_resource_allocations_incident_id', 'resource_allocations', ['incident_id'])

    op.create_table(
        'alerts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=False),
        sa.Column('target_users', _json(), nullable=True),
        sa.Column('incident_id', sa.String(36), nullable=True),
        sa.Column('location', _json(), nullable=True),
        sa.Column('created_by', sa.String(36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('read', sa.Boolean(), server_default=sa.false()),
        sa.Column('data', _json(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_notifications_user_id_created_at', 'notifications', ['user_id', 'created_at'])

    op.create_table(
        'analytics',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('data', _json(), nullable=False),
        sa.Column('period', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_analytics_type_period', 'analytics', ['type', 'period'])


def downgrade() -> None:
    op.drop_index('idx_analytics_type_period', table_name='analytics')
    op.drop_table('analytics')
    op.drop_index('idx_notifications_user_id_created_at', table_name='notifications')
    op.drop_table('notifications')
    op.drop_table('alerts')
    op.drop_index('idx_resource_allocations_incident_id', table_name='resource_allocations')
    op.drop_index('idx_resource_allocations_resource_id', table_name='resource_allocations')
    op.drop_table('resource_allocations')
    op.drop_index('idx_resources_organization', table_name='resources')
    op.drop_table('resources')
    op.drop_index('idx_incidents_assigned_to', table_name='incidents')
    op.drop_index('idx_incidents_reported_by', table_name='incidents')
    op.drop_index('idx_incidents_status', table_name='incidents')
    op.drop_table('incidents')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
