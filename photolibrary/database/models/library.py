from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    BigInteger, Column, DateTime, Enum as SAEnum, Float, ForeignKey, Index, Integer, String, Table, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photolibrary.database.core.main import Base
from photolibrary.domain.enums.media_kind import MediaKind

library_album_asset = Table(
    "library_album_asset",
    Base.metadata,
    Column("album_id", String(255), ForeignKey("library_album.id", ondelete="CASCADE"), primary_key=True),
    Column("asset_id", String(255), ForeignKey("library_asset.id", ondelete="CASCADE"), primary_key=True),
)


class LibraryAsset(Base):
    __tablename__ = "library_asset"
    __table_args__ = (
        Index("ix_library_asset_kind_created", "media_kind", "created_at"),
    )

    # opaque, stable identifier (e.g. "B84E8479-475C-4727-A4A4-B77AA9980897/L0/001")
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    media_kind: Mapped[MediaKind] = mapped_column(SAEnum(MediaKind, name="media_kind"), nullable=False)

    file_name: Mapped[Optional[str]] = mapped_column(Text)
    original_file_name: Mapped[Optional[str]] = mapped_column(Text)
    mime_type: Mapped[Optional[str]] = mapped_column(String(127))

    width: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    height: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration: Mapped[Optional[float]] = mapped_column(Float)
    size_bytes: Mapped[Optional[int]] = mapped_column(BigInteger)

    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    # where the original bytes live; at least one is expected to be set
    local_path: Mapped[Optional[str]] = mapped_column(Text)
    cloud_path: Mapped[Optional[str]] = mapped_column(Text)

    albums: Mapped[List["LibraryAlbum"]] = relationship(
        secondary=library_album_asset, back_populates="assets"
    )


class LibraryAlbum(Base):
    __tablename__ = "library_album"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # "album" (user) or "smartAlbum" (system); user albums are listed first
    collection_type: Mapped[str] = mapped_column(String(32), nullable=False, default="album")

    assets: Mapped[List[LibraryAsset]] = relationship(
        secondary=library_album_asset, back_populates="albums"
    )
