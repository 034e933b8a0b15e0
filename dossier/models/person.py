"""Person model: one row of the ``people`` roster table."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ..database import Base


class Person(Base):
    """Stored personnel record.

    Column names follow the historical table layout: the canonical
    ``workplace`` value lives in ``unit``, and ``affiliation`` is kept
    both inside ``stats`` and as its own column for older readers.
    """

    __tablename__ = "people"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    callsign: Mapped[str] = mapped_column(
        String(200), nullable=False, default="", server_default=""
    )
    role: Mapped[str] = mapped_column(
        String(200), nullable=False, default="", server_default=""
    )
    unit: Mapped[str] = mapped_column(
        String(200), nullable=False, default="", server_default=""
    )

    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    image_url: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    dossier_notes: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )

    traits: Mapped[list[Any]] = mapped_column(
        JSON, nullable=False, default=list, server_default="[]"
    )
    proficiencies: Mapped[list[Any]] = mapped_column(
        JSON, nullable=False, default=list, server_default="[]"
    )
    stats: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict, server_default="{}"
    )
    affiliation: Mapped[str] = mapped_column(
        String(200), nullable=False, default="", server_default=""
    )

    last_seen_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_seen_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_seen_notes: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    last_seen_timestamp: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        nullable=False,
    )

    def to_raw(self) -> dict[str, Any]:
        """Column values keyed by column name, as the normalizer expects."""
        return {
            column.key: getattr(self, column.key) for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, name={self.name})>"
