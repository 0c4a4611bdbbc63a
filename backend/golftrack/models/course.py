from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from golftrack.db.base import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    city: Mapped[str | None] = mapped_column(String(50))
    state: Mapped[str | None] = mapped_column(String(2), index=True)
    rating: Mapped[float | None] = mapped_column(Float)
    slope: Mapped[int | None] = mapped_column(Integer)
    lat: Mapped[float | None] = mapped_column(Float)
    lng: Mapped[float | None] = mapped_column(Float)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    owner = relationship("Player")

    holes: Mapped[list["Hole"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Hole.number",
    )

    @property
    def owner_id(self) -> str:
        # External identity (Auth0 `sub` in prod, X-User-Id in dev).
        return self.owner.external_id if self.owner else ""

    @property
    def total_par(self) -> int:
        return sum(h.par for h in self.holes)


class Hole(Base):
    __tablename__ = "holes"
    __table_args__ = (
        UniqueConstraint("course_id", "number", name="uq_hole_course_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    par: Mapped[int] = mapped_column(Integer, nullable=False)
    yardage: Mapped[int | None] = mapped_column(Integer)
    hcp: Mapped[int | None] = mapped_column(Integer)

    tee_lat: Mapped[float | None] = mapped_column(Float)
    tee_lng: Mapped[float | None] = mapped_column(Float)
    green_lat: Mapped[float | None] = mapped_column(Float)
    green_lng: Mapped[float | None] = mapped_column(Float)

    course: Mapped["Course"] = relationship(back_populates="holes")
