from __future__ import annotations

from datetime import datetime

from sqlalchemy import Index, String, Text, func
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from wordflight_chat.infrastructure.db.base import Base


class MessageModel(Base):
    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Plain reference, no foreign key: room deletes remove messages explicitly.
    room_id: Mapped[str] = mapped_column(String(20), nullable=False)
    room_creator: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=True,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_messages_room_timeline", "room_id", "created_at", "id"),
    )
