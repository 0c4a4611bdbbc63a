"""add players, courses and holes

Revision ID: 2f6d1c0a9b3e
Revises:
Create Date: 2026-09-02

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "2f6d1c0a9b3e"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("handicap", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_players_external_id"), "players", ["external_id"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_player_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("city", sa.String(length=50), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("slope", sa.Integer(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["owner_player_id"], ["players.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_courses_id"), "courses", ["id"], unique=False)
    op.create_index(op.f("ix_courses_owner_player_id"), "courses", ["owner_player_id"], unique=False)
    op.create_index(op.f("ix_courses_name"), "courses", ["name"], unique=False)
    op.create_index(op.f("ix_courses_state"), "courses", ["state"], unique=False)

    op.create_table(
        "holes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("par", sa.Integer(), nullable=False),
        sa.Column("yardage", sa.Integer(), nullable=True),
        sa.Column("hcp", sa.Integer(), nullable=True),
        sa.Column("tee_lat", sa.Float(), nullable=True),
        sa.Column("tee_lng", sa.Float(), nullable=True),
        sa.Column("green_lat", sa.Float(), nullable=True),
        sa.Column("green_lng", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("course_id", "number", name="uq_hole_course_number"),
    )
    op.create_index(op.f("ix_holes_course_id"), "holes", ["course_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_holes_course_id"), table_name="holes")
    op.drop_table("holes")
    op.drop_index(op.f("ix_courses_state"), table_name="courses")
    op.drop_index(op.f("ix_courses_name"), table_name="courses")
    op.drop_index(op.f("ix_courses_owner_player_id"), table_name="courses")
    op.drop_index(op.f("ix_courses_id"), table_name="courses")
    op.drop_table("courses")
    op.drop_index(op.f("ix_players_external_id"), table_name="players")
    op.drop_table("players")
