"""create exam session tables

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 10:12:44.381920

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1c3e5f7b9d2"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("subject", sa.String(20), nullable=False),
        sa.Column("class_level", sa.String(20), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=True),
        sa.Column("question_image", sa.Text(), nullable=True),
        sa.Column("options", JSONType, nullable=False),
        sa.Column("correct_answer_index", sa.Integer(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_questions_id", "questions", ["id"])
    op.create_index("ix_questions_subject", "questions", ["subject"])
    op.create_index("ix_questions_class_level", "questions", ["class_level"])

    op.create_table(
        "exam_tests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
    )
    op.create_index("ix_exam_tests_id", "exam_tests", ["id"])
    op.create_index("ix_exam_tests_kind", "exam_tests", ["kind"])

    op.create_table(
        "exam_test_sections",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "test_id",
            sa.Integer(),
            sa.ForeignKey("exam_tests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("section_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("marks_per_question", sa.Integer(), nullable=False),
        sa.Column("question_ids", JSONType, nullable=False),
        sa.Column("subjects", JSONType, nullable=False),
        sa.UniqueConstraint(
            "test_id", "section_number", name="uq_test_section_number"
        ),
    )
    op.create_index("ix_exam_test_sections_id", "exam_test_sections", ["id"])
    op.create_index(
        "ix_exam_test_sections_test_id", "exam_test_sections", ["test_id"]
    )

    op.create_table(
        "test_attempts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "test_id", sa.Integer(), sa.ForeignKey("exam_tests.id"), nullable=False
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("section_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("completion_timestamp", sa.BigInteger(), nullable=True),
        sa.Column("total_score", sa.Integer(), nullable=True),
        sa.Column("total_time_taken", sa.BigInteger(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_test_attempts_id", "test_attempts", ["id"])
    op.create_index("ix_test_attempts_test_id", "test_attempts", ["test_id"])
    op.create_index("ix_test_attempts_user_id", "test_attempts", ["user_id"])
    op.create_index("ix_test_attempts_is_completed", "test_attempts", ["is_completed"])

    op.create_table(
        "test_attempt_sections",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "attempt_id",
            sa.Integer(),
            sa.ForeignKey("test_attempts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("section_number", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.BigInteger(), nullable=True),
        sa.Column("submitted_at", sa.BigInteger(), nullable=True),
        sa.Column("draft_answers", JSONType, nullable=True),
        sa.Column("answers", JSONType, nullable=True),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("correct_answers", sa.Integer(), nullable=True),
        sa.Column("attempted", sa.Integer(), nullable=True),
        sa.Column("auto_submitted", sa.Boolean(), nullable=False),
        sa.UniqueConstraint(
            "attempt_id", "section_number", name="uq_attempt_section_number"
        ),
    )
    op.create_index("ix_test_attempt_sections_id", "test_attempt_sections", ["id"])
    op.create_index(
        "ix_test_attempt_sections_attempt_id", "test_attempt_sections", ["attempt_id"]
    )


def downgrade() -> None:
    op.drop_table("test_attempt_sections")
    op.drop_table("test_attempts")
    op.drop_table("exam_test_sections")
    op.drop_table("exam_tests")
    op.drop_table("questions")
    op.drop_table("users")
