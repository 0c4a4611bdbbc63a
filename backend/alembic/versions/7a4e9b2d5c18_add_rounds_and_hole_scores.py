"""add rounds and hole scores

Revision ID: 7a4e9b2d5c18
Revises: 2f6d1c0a9b3e
Create Date: 2026-09-04

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "7a4e9b2d5c18"
down_revision = "2f6d1c0a9b3e"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "rounds",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("weather", sa.String(length=100), nullable=True),
        sa.Column("temperature", sa.Integer(), nullable=True),
        sa.Column("wind_speed", sa.Integer(), nullable=True),
        sa.Column("wind_direction", sa.String(length=2), nullable=True),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_rounds_player_id"), "rounds", ["player_id"], unique=False)
    op.create_index(op.f("ix_rounds_course_id"), "rounds", ["course_id"], unique=False)
    op.create_index(op.f("ix_rounds_start_time"), "rounds", ["start_time"], unique=False)

    op.create_table(
        "hole_scores",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("round_id", sa.Integer(), nullable=False),
        sa.Column("hole_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("putts", sa.Integer(), nullable=True),
        sa.Column("fairway", sa.Boolean(), nullable=True),
        sa.Column("gir", sa.Boolean(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["round_id"], ["rounds.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["hole_id"], ["holes.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("round_id", "hole_id", name="uq_hole_score_round_hole"),
    )
    op.create_index(op.f("ix_hole_scores_round_id"), "hole_scores", ["round_id"], unique=False)
    op.create_index(op.f("ix_hole_scores_hole_id"), "hole_scores", ["hole_id"], unique=False)
    op.create_index(op.f("ix_hole_scores_player_id"), "hole_scores", ["player_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_hole_scores_player_id"), table_name="hole_scores")
    op.drop_index(op.f("ix_hole_scores_hole_id"), table_name="hole_scores")
    op.drop_index(op.f("ix_hole_scores_round_id"), table_name="hole_scores")
    op.drop_table("hole_scores")
    op.drop_index(op.f("ix_rounds_start_time"), table_name="rounds")
    op.drop_index(op.f("ix_rounds_course_id"), table_name="rounds")
    op.drop_index(op.f("ix_rounds_player_id"), table_name="rounds")
    op.drop_table("rounds")
