"""initial garment, embedding, settings and wear tables

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from pgvector.sqlalchemy import Vector

# revision identifiers, used by Alembic.
revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS vector;")
    op.create_table('garment',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('warmth_score', sa.Integer(), nullable=True),
        sa.Column('formality_score', sa.Integer(), nullable=True),
        sa.Column('water_resistant', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('wind_resistant', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('uv_resistant', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('has_pattern', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('pattern_type', sa.String(length=32), nullable=True),
        sa.Column('pattern_intensity', sa.String(length=16), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('last_worn', sa.DateTime(timezone=True), nullable=True),
        sa.Column('wear_count', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint("category in ('top','bottom','dress','footwear','outerwear','accessory')", name='ck_garment_category'),
    )
    op.create_index('ix_garment_user_id', 'garment', ['user_id'])
    op.create_index('ix_garment_user_available', 'garment', ['user_id', 'is_available', 'warmth_score'])

    op.create_table('garment_color',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('garment_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('garment.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rank', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('lab_l', sa.Float(), nullable=False),
        sa.Column('lab_a', sa.Float(), nullable=False),
        sa.Column('lab_b', sa.Float(), nullable=False),
        sa.Column('ratio', sa.Float(), nullable=False),
        sa.Column('chroma', sa.Float(), nullable=True),
        sa.Column('hue', sa.Float(), nullable=True),
        sa.Column('is_neutral', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_accent', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('hex', sa.String(length=7), nullable=True),
    )
    op.create_index('ix_garment_color_garment', 'garment_color', ['garment_id', 'rank'])

    op.create_table('garment_embedding',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('garment_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('garment.id', ondelete='CASCADE'), nullable=False),
        sa.Column('model', sa.Text(), nullable=False),
        sa.Column('vector', Vector(512), nullable=False),
        sa.Column('computed_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.UniqueConstraint('garment_id', 'model', name='uq_garment_embedding_model'),
    )
    op.create_index('ix_garment_embedding_garment_id', 'garment_embedding', ['garment_id'])

    op.create_table('user_settings',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('recency_days', sa.Integer(), nullable=True),
        sa.Column('outfit_weights', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('location_lat', sa.Float(), nullable=True),
        sa.Column('location_lon', sa.Float(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )

    op.create_table('wear_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('garment_ids', postgresql.ARRAY(postgresql.UUID(as_uuid=True)), nullable=False),
        sa.Column('date_worn', sa.Date(), nullable=False),
        sa.Column('weather_temp', sa.Float(), nullable=True),
        sa.Column('weather_condition', sa.Text(), nullable=True),
        sa.Column('weather_json', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_wear_history_user_date', 'wear_history', ['user_id', 'date_worn'])

def downgrade() -> None:
    op.drop_index('ix_wear_history_user_date', table_name='wear_history')
    op.drop_table('wear_history')
    op.drop_table('user_settings')
    op.drop_index('ix_garment_embedding_garment_id', table_name='garment_embedding')
    op.drop_table('garment_embedding')
    op.drop_index('ix_garment_color_garment', table_name='garment_color')
    op.drop_table('garment_color')
    op.drop_index('ix_garment_user_available', table_name='garment')
    op.drop_index('ix_garment_user_id', table_name='garment')
    op.drop_table('garment')
