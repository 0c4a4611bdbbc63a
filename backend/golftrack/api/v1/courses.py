from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from golftrack.api.deps import get_current_player, get_db, get_identity
from golftrack.core.auth import Identity
from golftrack.api.v1.pagination import Page, page_of
from golftrack.core.errors import (
    COURSE_IN_USE,
    COURSE_NOT_FOUND,
    AuthorizationError,
    ConflictError,
    NotFoundError,
)
from golftrack.core.settings import settings
from golftrack.models.course import Course, Hole
from golftrack.models.player import Player
from golftrack.models.round import Round

router = APIRouter()


class HoleIn(BaseModel):
    number: int = Field(ge=1, le=18)
    par: int = Field(ge=3, le=6)
    yardage: int | None = Field(default=None, ge=50, le=800)
    hcp: int | None = Field(default=None, ge=1, le=18)
    tee_lat: float | None = Field(default=None, ge=-90, le=90)
    tee_lng: float | None = Field(default=None, ge=-180, le=180)
    green_lat: float | None = Field(default=None, ge=-90, le=90)
    green_lng: float | None = Field(default=None, ge=-180, le=180)


class HoleOut(HoleIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    city: str | None = Field(default=None, min_length=1, max_length=50)
    state: str | None = Field(default=None, min_length=2, max_length=2)
    rating: float | None = None
    slope: int | None = Field(default=None, ge=55, le=155)
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    holes: list[HoleIn]

    @field_validator("holes")
    @classmethod
    def validate_holes(cls, holes: list[HoleIn]) -> list[HoleIn]:
        if len(holes) not in (9, 18):
            raise ValueError("holes must be length 9 or 18")
        numbers = [h.number for h in holes]
        if len(set(numbers)) != len(numbers):
            raise ValueError("hole numbers must be unique")

        max_hcp = len(holes)
        for h in holes:
            if h.hcp is not None and h.hcp > max_hcp:
                raise ValueError(f"hcp must be between 1 and {max_hcp}")

        return holes


class CourseSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    city: str | None
    state: str | None


class CourseOut(CourseSummaryOut):
    owner_id: str
    rating: float | None
    slope: int | None
    lat: float | None
    lng: float | None
    total_par: int
    holes: list[HoleOut]


def _get_course(db: Session, course_id: int) -> Course:
    stmt = (
        select(Course)
        .options(joinedload(Course.owner), joinedload(Course.holes))
        .where(Course.id == course_id, Course.archived_at.is_(None))
    )
    course = db.execute(stmt).scalars().unique().one_or_none()
    if not course:
        raise NotFoundError(COURSE_NOT_FOUND, "Course not found")
    return course


@router.post("/courses", response_model=CourseOut, status_code=201)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    owner: Player = Depends(get_current_player),
):
    course = Course(
        owner_player_id=owner.id,
        name=payload.name.strip(),
        city=payload.city,
        state=payload.state.upper() if payload.state else None,
        rating=payload.rating,
        slope=payload.slope,
        lat=payload.lat,
        lng=payload.lng,
    )
    course.holes = [Hole(**h.model_dump()) for h in sorted(payload.holes, key=lambda h: h.number)]

    db.add(course)
    db.commit()

    return _get_course(db, course.id)


@router.get("/courses", response_model=Page[CourseSummaryOut])
def list_courses(
    query: str | None = Query(default=None, min_length=1, max_length=100),
    state: str | None = Query(default=None, min_length=2, max_length=2),
    city: str | None = Query(default=None, min_length=1, max_length=50),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _identity: Identity = Depends(get_identity),
):
    conditions = [Course.archived_at.is_(None)]
    if query:
        needle = f"%{query.strip()}%"
        conditions.append(or_(Course.name.ilike(needle), Course.city.ilike(needle)))
    if state:
        conditions.append(Course.state == state.upper())
    if city:
        conditions.append(Course.city.ilike(city.strip()))

    total = db.execute(select(func.count(Course.id)).where(*conditions)).scalar_one()
    courses = db.execute(
        select(Course).where(*conditions).order_by(Course.name, Course.id).limit(limit).offset(offset)
    ).scalars().all()

    return page_of(courses, total=total, limit=limit, offset=offset)


@router.get("/courses/{course_id}", response_model=CourseOut)
def get_course(
    course_id: int,
    db: Session = Depends(get_db),
    _identity: Identity = Depends(get_identity),
):
    return _get_course(db, course_id)


@router.delete("/courses/{course_id}")
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    owner: Player = Depends(get_current_player),
):

    course = _get_course(db, course_id)
    # Courses are public, so revealing existence to a non-owner is fine here.
    if course.owner_player_id != owner.id:
        raise AuthorizationError("Only the course creator can archive it")

    active = db.execute(
        select(Round.id)
        .where(Round.course_id == course_id, Round.end_time.is_(None))
        .limit(1)
    ).first()
    if active:
        raise ConflictError(COURSE_IN_USE, "Course has active rounds")

    course.archived_at = datetime.now(timezone.utc)
    db.commit()

    return {"ok": True}
