"""add shots

Revision ID: c91f3e7a2b60
Revises: 7a4e9b2d5c18
Create Date: 2026-09-11

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "c91f3e7a2b60"
down_revision = "7a4e9b2d5c18"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "shots",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("round_id", sa.Integer(), nullable=False),
        sa.Column("hole_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("shot_number", sa.Integer(), nullable=False),
        sa.Column("club", sa.String(length=32), nullable=False),
        sa.Column("distance", sa.Float(), nullable=True),
        sa.Column("start_lat", sa.Float(), nullable=False),
        sa.Column("start_lng", sa.Float(), nullable=False),
        sa.Column("end_lat", sa.Float(), nullable=True),
        sa.Column("end_lng", sa.Float(), nullable=True),
        sa.Column("result", sa.String(length=16), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["round_id"], ["rounds.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["hole_id"], ["holes.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        # Shot numbers are caller supplied; the database is the final arbiter of uniqueness.
        sa.UniqueConstraint("round_id", "hole_id", "shot_number", name="uq_shot_round_hole_number"),
    )
    op.create_index(op.f("ix_shots_round_id"), "shots", ["round_id"], unique=False)
    op.create_index(op.f("ix_shots_hole_id"), "shots", ["hole_id"], unique=False)
    op.create_index(op.f("ix_shots_player_id"), "shots", ["player_id"], unique=False)
    op.create_index(op.f("ix_shots_club"), "shots", ["club"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_shots_club"), table_name="shots")
    op.drop_index(op.f("ix_shots_player_id"), table_name="shots")
    op.drop_index(op.f("ix_shots_hole_id"), table_name="shots")
    op.drop_index(op.f("ix_shots_round_id"), table_name="shots")
    op.drop_table("shots")
