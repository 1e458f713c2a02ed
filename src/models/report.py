"""Report model for persisted lead water reports."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Float, String, false, func
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base


class Report(Base):
    """A personalized water report requested for one CRM lead."""

    __tablename__ = "reports"

    # 12 hex chars from secrets.token_hex(6); never reused
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    client_name: Mapped[str] = mapped_column(String(255))
    address: Mapped[str] = mapped_column(String(500))
    city: Mapped[str] = mapped_column(String(255))
    state: Mapped[str] = mapped_column(String(64))
    zip: Mapped[str] = mapped_column(String(16))
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    viewed: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    def __repr__(self):
        return f"<Report(id='{self.id}', client='{self.client_name}', viewed={self.viewed})>"
