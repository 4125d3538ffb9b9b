"""Create spaced-repetition progress and review history tables."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20251105_0002"
down_revision: Union[str, None] = "20251104_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "srs_progress",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("card_id", sa.String(length=36), nullable=False),
        sa.Column("ease_factor", sa.Float(), server_default=sa.text("2.5"), nullable=False),
        sa.Column("interval_days", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("repetitions", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "next_review_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("last_review_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_reviews", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("correct_reviews", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("incorrect_reviews", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ("card_id",),
            ("cards.id",),
            name="fk_srs_progress_card_id_cards",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("user_id", "card_id", name="uq_srs_progress_user_card"),
    )
    op.create_index(
        "ix_srs_progress_user_id_next_review_at",
        "srs_progress",
        ("user_id", "next_review_at"),
    )

    op.create_table(
        "review_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("progress_id", sa.Integer(), nullable=False),
        sa.Column("quality", sa.Integer(), nullable=False),
        sa.Column("interval_days", sa.Integer(), nullable=False),
        sa.Column("ease_factor", sa.Float(), nullable=False),
        sa.Column(
            "reviewed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ("progress_id",),
            ("srs_progress.id",),
            name="fk_review_logs_progress_id_srs_progress",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_review_logs_progress_id", "review_logs", ("progress_id",))


def downgrade() -> None:
    op.drop_index("ix_review_logs_progress_id", table_name="review_logs")
    op.drop_table("review_logs")
    op.drop_index("ix_srs_progress_user_id_next_review_at", table_name="srs_progress")
    op.drop_table("srs_progress")
