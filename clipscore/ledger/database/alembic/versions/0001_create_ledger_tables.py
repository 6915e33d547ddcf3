"""Create users, question, forecast and reward_settlement tables

Revision ID: 0001_create_ledger_tables
Revises:
Create Date: 2025-11-20 10:00:00
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "0001_create_ledger_tables"
down_revision = None
branch_labels = None
depends_on = None


_KINDS = ("binary", "numeric")
_STATUSES = ("open", "closed", "resolved")
_MODES = ("time_weighted", "log", "confidence")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("clips", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.UniqueConstraint("external_id", name="uq_users_external_id"),
    )
    op.create_index("ix_users_clips", "users", ["clips"])

    op.create_table(
        "question",
        sa.Column("question_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("kind", sa.Enum(*_KINDS, name="question_kind"), nullable=False),
        sa.Column("scoring_mode", sa.Enum(*_MODES, name="scoring_mode"), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("status", sa.Enum(*_STATUSES, name="question_status"), nullable=False),
        sa.Column("close_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolution_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("outcome_binary", sa.Boolean(), nullable=True),
        sa.Column("outcome_numeric", sa.Float(), nullable=True),
        sa.Column("min_value", sa.Float(), nullable=True),
        sa.Column("max_value", sa.Float(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.ForeignKeyConstraint(
            ["created_by"], ["users.user_id"], name="fk_question_created_by_users"
        ),
        sa.CheckConstraint(
            "status = 'resolved' OR (outcome_binary IS NULL AND outcome_numeric IS NULL)",
            name="ck_question_outcome_iff_resolved",
        ),
        sa.CheckConstraint(
            "kind = 'binary' OR (min_value IS NOT NULL AND max_value IS NOT NULL AND min_value < max_value)",
            name="ck_question_numeric_range",
        ),
    )
    op.create_index("ix_question_status", "question", ["status"])
    op.create_index("ix_question_created_by", "question", ["created_by"])

    op.create_table(
        "forecast",
        sa.Column("forecast_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("probability", sa.Float(), nullable=True),
        sa.Column("prediction", sa.Float(), nullable=True),
        sa.Column("confidence", sa.Integer(), nullable=True),
        sa.Column("score", sa.Float(), nullable=True),
        sa.Column("clips_change", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["question.question_id"],
            name="fk_forecast_question_id_question",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.user_id"], name="fk_forecast_user_id_users", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_forecast_question_id", "forecast", ["question_id"])
    op.create_index("ix_forecast_user_id", "forecast", ["user_id"])
    op.create_index(
        "ix_forecast_question_user_created", "forecast", ["question_id", "user_id", "created_at"]
    )

    op.create_table(
        "reward_settlement",
        sa.Column("settlement_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("forecast_id", sa.Integer(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("clips_change", sa.Integer(), nullable=False),
        sa.Column("settled_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["question.question_id"],
            name="fk_reward_settlement_question_id_question",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.user_id"],
            name="fk_reward_settlement_user_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["forecast_id"],
            ["forecast.forecast_id"],
            name="fk_reward_settlement_forecast_id_forecast",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "question_id", "user_id", name="uq_reward_settlement_question_user"
        ),
    )
    op.create_index("ix_reward_settlement_user_id", "reward_settlement", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_reward_settlement_user_id", table_name="reward_settlement")
    op.drop_table("reward_settlement")
    op.drop_index("ix_forecast_question_user_created", table_name="forecast")
    op.drop_index("ix_forecast_user_id", table_name="forecast")
    op.drop_index("ix_forecast_question_id", table_name="forecast")
    op.drop_table("forecast")
    op.drop_index("ix_question_created_by", table_name="question")
    op.drop_index("ix_question_status", table_name="question")
    op.drop_table("question")
    op.drop_index("ix_users_clips", table_name="users")
    op.drop_table("users")
