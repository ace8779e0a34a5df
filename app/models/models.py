from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, Float, Boolean, ForeignKey, DateTime, Text, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.sql import func
import uuid
from datetime import datetime, date
from app.core.db import Base
import sqlalchemy as sa
from pgvector.sqlalchemy import Vector


class Garment(Base):
    __tablename__ = "garment"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    category: Mapped[str] = mapped_column(String(32))
    warmth_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    formality_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    water_resistant: Mapped[bool] = mapped_column(Boolean, default=False)
    wind_resistant: Mapped[bool] = mapped_column(Boolean, default=False)
    uv_resistant: Mapped[bool] = mapped_column(Boolean, default=False)
    has_pattern: Mapped[bool] = mapped_column(Boolean, default=False)
    pattern_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    pattern_intensity: Mapped[str | None] = mapped_column(String(16), nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    last_worn: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    wear_count: Mapped[int] = mapped_column(Integer, default=0)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    colors: Mapped[list["GarmentColor"]] = relationship(
        "GarmentColor",
        back_populates="garment",
        lazy="selectin",
        order_by="GarmentColor.rank",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class GarmentColor(Base):
    __tablename__ = "garment_color"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    garment_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("garment.id", ondelete="CASCADE"))
    rank: Mapped[int] = mapped_column(Integer, default=0)
    lab_l: Mapped[float] = mapped_column(Float)
    lab_a: Mapped[float] = mapped_column(Float)
    lab_b: Mapped[float] = mapped_column(Float)
    ratio: Mapped[float] = mapped_column(Float)
    chroma: Mapped[float | None] = mapped_column(Float, nullable=True)
    hue: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_neutral: Mapped[bool] = mapped_column(Boolean, default=False)
    is_accent: Mapped[bool] = mapped_column(Boolean, default=False)
    hex: Mapped[str | None] = mapped_column(String(7), nullable=True)
    garment: Mapped["Garment"] = relationship("Garment", back_populates="colors")


class GarmentEmbedding(Base):
    __tablename__ = "garment_embedding"
    __table_args__ = (UniqueConstraint("garment_id", "model", name="uq_garment_embedding_model"),)
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    garment_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("garment.id", ondelete="CASCADE"), index=True)
    model: Mapped[str] = mapped_column(Text)
    vector = mapped_column(Vector(512), nullable=False)
    computed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class UserSettings(Base):
    __tablename__ = "user_settings"
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    recency_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    outfit_weights: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lon: Mapped[float | None] = mapped_column(Float, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class WearHistory(Base):
    __tablename__ = "wear_history"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    garment_ids: Mapped[list[uuid.UUID]] = mapped_column(ARRAY(UUID(as_uuid=True)))
    date_worn: Mapped[date] = mapped_column(sa.Date())
    weather_temp: Mapped[float | None] = mapped_column(Float, nullable=True)
    weather_condition: Mapped[str | None] = mapped_column(Text, nullable=True)
    weather_json: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
