"""Initial migration - users, profiles, police stations, officers, criminals, FIRs, activities

Revision ID: 001
Revises: 
Create Date: 2024-06-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Enum columns are stored as plain strings holding the enum value
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('profile_image_url', sa.String(length=512), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('idx_user_role', 'users', ['role'])

    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])

    op.create_table(
        'police_stations',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('contact', sa.String(length=100), nullable=False),
        sa.Column('officer_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_station_name', 'police_stations', ['name'])

    op.create_table(
        'officers',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('badge_number', sa.String(length=50), nullable=False),
        sa.Column('rank', sa.String(length=100), nullable=False),
        sa.Column('station_id', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['station_id'], ['police_stations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_officers_badge_number', 'officers', ['badge_number'], unique=True)
    op.create_index('idx_officer_station', 'officers', ['station_id'])

    op.create_table(
        'criminals',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('last_crime_date', sa.Date(), nullable=False),
        sa.Column('crime_types', sa.JSON(), nullable=False),
        sa.Column('photo_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_criminal_status', 'criminals', ['status'])

    op.create_table(
        'fir_details',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('complainant_name', sa.String(length=255), nullable=False),
        sa.Column('complainant_id', sa.String(length=100), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('date_filed', sa.Date(), nullable=False),
        sa.Column('incident_type', sa.String(length=100), nullable=False),
        sa.Column('station_id', sa.String(length=50), nullable=False),
        sa.Column('station_name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['station_id'], ['police_stations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_fir_station', 'fir_details', ['station_id'])
    op.create_index('idx_fir_status', 'fir_details', ['status'])
    op.create_index('idx_fir_date_filed', 'fir_details', ['date_filed'])

    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('officer', sa.String(length=255), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activities_id', 'activities', ['id'])
    op.create_index('idx_activity_timestamp', 'activities', ['timestamp'])


def downgrade() -> None:
    op.drop_table('activities')
    op.drop_table('fir_details')
    op.drop_table('criminals')
    op.drop_table('officers')
    op.drop_table('police_stations')
    op.drop_table('profiles')
    op.drop_table('users')
