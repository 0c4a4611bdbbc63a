from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from golftrack.db.base import Base


class Player(Base):
    """A golfer, keyed by the auth subject and created on first request."""

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    external_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)

    name: Mapped[str | None] = mapped_column(String(128))
    # Handicap index as the player reports it; not derived from rounds.
    handicap: Mapped[float | None] = mapped_column(Float)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    rounds: Mapped[list["Round"]] = relationship(  # noqa: F821
        back_populates="player",
        order_by="Round.start_time.desc()",
    )

    @property
    def display_name(self) -> str:
        return self.name or self.external_id
