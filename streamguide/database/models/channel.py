"""
Channel Database Model

Channels are created out-of-band (seeding or admin) and only scope
program queries.
"""

from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from streamguide.database.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from streamguide.database.models.program import ProgramRecord


class Channel(Base, TimestampMixin):
    """A broadcast channel. The slug doubles as the primary key."""

    __tablename__ = "channels"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Branding
    logo: Mapped[str | None] = mapped_column(String(16), nullable=True)
    color: Mapped[str | None] = mapped_column(String(16), nullable=True, default="#000000")

    programs: Mapped[list["ProgramRecord"]] = relationship(
        "ProgramRecord",
        back_populates="channel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def slug(self) -> str:
        return self.id

    @property
    def display_logo(self) -> str:
        """Explicit logo, or the first two letters of the name."""
        return self.logo or self.name[:2].upper()

    def __repr__(self) -> str:
        return f"<Channel {self.id}: {self.name}>"
