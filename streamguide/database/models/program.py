"""
Program Database Model

Stores absolute start/end instants; the HH:mm + date projection used by
the scheduling core is derived when records are loaded.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from streamguide.database.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from streamguide.database.models.channel import Channel


class ProgramRecord(Base, TimestampMixin):
    """A scheduled video on a channel."""

    __tablename__ = "programs"
    __table_args__ = (
        Index("ix_programs_channel_start", "channel_id", "start_time"),
        Index("ix_programs_channel_end", "channel_id", "end_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Metadata
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timing: duration in seconds, absolute local wall-clock instants
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    channel: Mapped["Channel"] = relationship("Channel", back_populates="programs")

    def __repr__(self) -> str:
        return f"<ProgramRecord {self.id}: {self.title!r} {self.start_time}-{self.end_time}>"
