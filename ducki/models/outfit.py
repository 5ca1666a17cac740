"""
Outfit models - named groups of items with an ordered media gallery
"""
from __future__ import annotations

from sqlalchemy import String, Integer, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
import enum
from ducki.database import Base
from ducki.core.datetime_utils import utc_now


class MediaType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


class Outfit(Base):
    __tablename__ = "outfits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cover_image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)  # Legacy cover
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    def __repr__(self):
        return f"<Outfit(id={self.id}, user_id={self.user_id}, name={self.name})>"


class OutfitMedia(Base):
    """
    Photo or video attached to an outfit
    position is assigned at append time and never renumbered
    """
    __tablename__ = "outfit_media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    outfit_id: Mapped[int] = mapped_column(Integer, ForeignKey("outfits.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    media_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    media_type: Mapped[MediaType] = mapped_column(SQLEnum(MediaType), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    def __repr__(self):
        return f"<OutfitMedia(id={self.id}, outfit_id={self.outfit_id}, position={self.position})>"


class OutfitItem(Base):
    """Membership row: one item inside one outfit"""
    __tablename__ = "outfit_items"

    outfit_id: Mapped[int] = mapped_column(Integer, ForeignKey("outfits.id"), primary_key=True)
    item_id: Mapped[int] = mapped_column(Integer, ForeignKey("items.id"), primary_key=True, index=True)

    def __repr__(self):
        return f"<OutfitItem(outfit_id={self.outfit_id}, item_id={self.item_id})>"
