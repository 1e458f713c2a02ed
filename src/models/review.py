"""Customer testimonial model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base


class Review(Base):
    """A stored testimonial, maintained by an admin process."""

    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    author: Mapped[str] = mapped_column(String(255))
    quote: Mapped[str] = mapped_column(Text)
    zip: Mapped[str] = mapped_column(String(16), index=True)
    rating: Mapped[int] = mapped_column(Integer, index=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    def __repr__(self):
        return f"<Review(author='{self.author}', zip='{self.zip}', rating={self.rating})>"
