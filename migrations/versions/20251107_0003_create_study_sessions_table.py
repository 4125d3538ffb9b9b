"""Create the study session summary table."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20251107_0003"
down_revision: Union[str, None] = "20251105_0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "study_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("collection_id", sa.String(length=36), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cards_reviewed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("cards_correct", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.ForeignKeyConstraint(
            ("collection_id",),
            ("collections.id",),
            name="fk_study_sessions_collection_id_collections",
            ondelete="SET NULL",
        ),
    )
    op.create_index(
        "ix_study_sessions_user_id_started_at",
        "study_sessions",
        ("user_id", "started_at"),
    )


def downgrade() -> None:
    op.drop_index("ix_study_sessions_user_id_started_at", table_name="study_sessions")
    op.drop_table("study_sessions")
