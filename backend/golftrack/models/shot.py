from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from golftrack.db.base import Base
from golftrack.golf.geo import distance_yards
from golftrack.golf.rounding import round_half_up_to


class Shot(Base):
    __tablename__ = "shots"
    __table_args__ = (
        # Closes the race between the duplicate check and the insert.
        UniqueConstraint(
            "round_id", "hole_id", "shot_number", name="uq_shot_round_hole_number"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    round_id: Mapped[int] = mapped_column(
        ForeignKey("rounds.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hole_id: Mapped[int] = mapped_column(
        ForeignKey("holes.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    shot_number: Mapped[int] = mapped_column(Integer, nullable=False)
    club: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    distance: Mapped[float | None] = mapped_column(Float)

    start_lat: Mapped[float] = mapped_column(Float, nullable=False)
    start_lng: Mapped[float] = mapped_column(Float, nullable=False)
    end_lat: Mapped[float | None] = mapped_column(Float)
    end_lng: Mapped[float | None] = mapped_column(Float)

    result: Mapped[str | None] = mapped_column(String(16))
    notes: Mapped[str | None] = mapped_column(String(500))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    round = relationship("Round", back_populates="shots")
    hole = relationship("Hole")
    player = relationship("Player")

    @property
    def start_location(self) -> dict:
        return {"lat": self.start_lat, "lng": self.start_lng}

    @property
    def end_location(self) -> dict | None:
        if self.end_lat is None or self.end_lng is None:
            return None
        return {"lat": self.end_lat, "lng": self.end_lng}

    @property
    def measured_distance(self) -> float | None:
        if self.end_lat is None or self.end_lng is None:
            return None
        yards = distance_yards((self.start_lat, self.start_lng), (self.end_lat, self.end_lng))
        return round_half_up_to(yards, 1)
