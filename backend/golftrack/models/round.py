from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from golftrack.db.base import Base


class Round(Base):
    __tablename__ = "rounds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    weather: Mapped[str | None] = mapped_column(String(100))
    temperature: Mapped[int | None] = mapped_column(Integer)
    wind_speed: Mapped[int | None] = mapped_column(Integer)
    wind_direction: Mapped[str | None] = mapped_column(String(2))

    # Total strokes; only written by golftrack.golf.totals.
    score: Mapped[int | None] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    course = relationship("Course")
    player = relationship("Player", back_populates="rounds")
    hole_scores: Mapped[list["HoleScore"]] = relationship(  # noqa: F821
        back_populates="round",
        cascade="all, delete-orphan",
    )
    shots: Mapped[list["Shot"]] = relationship(  # noqa: F821
        back_populates="round",
        cascade="all, delete-orphan",
        order_by="Shot.shot_number",
    )
