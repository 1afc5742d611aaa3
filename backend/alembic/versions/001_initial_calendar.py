"""Initial calendar tables: availability records and slots, scheduled sessions, campaigns, settings

Revision ID: 001
Revises:
Create Date: (run alembic upgrade head)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "campaigns",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "campaign_members",
        sa.Column(
            "campaign_id",
            sa.String(64),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("username", sa.String(64), primary_key=True),
    )
    op.create_table(
        "availability_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("campaign_id", sa.String(64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("username", "campaign_id", "date", name="uq_availability_records_user_campaign_date"),
    )
    op.create_index("ix_availability_records_username", "availability_records", ["username"], unique=False)
    op.create_index("ix_availability_records_campaign_id", "availability_records", ["campaign_id"], unique=False)
    op.create_table(
        "availability_slots",
        sa.Column(
            "record_id",
            sa.Integer(),
            sa.ForeignKey("availability_records.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("hour_key", sa.String(8), primary_key=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_table(
        "scheduled_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("campaign_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("start_time", sa.Float(), nullable=False),
        sa.Column("end_time", sa.Float(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("recurring_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recurring_group_id", sa.String(64), nullable=True),
        sa.Column("recurring_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_recurrences", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_scheduled_sessions_campaign_id", "scheduled_sessions", ["campaign_id"], unique=False)
    op.create_index("ix_scheduled_sessions_date", "scheduled_sessions", ["date"], unique=False)
    op.create_index(
        "ix_scheduled_sessions_recurring_group_id", "scheduled_sessions", ["recurring_group_id"], unique=False
    )
    op.create_table(
        "settings",
        sa.Column("key", sa.String(32), primary_key=True),
        sa.Column("max_future_weeks", sa.Integer(), nullable=False, server_default="12"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("settings")
    op.drop_index("ix_scheduled_sessions_recurring_group_id", table_name="scheduled_sessions")
    op.drop_index("ix_scheduled_sessions_date", table_name="scheduled_sessions")
    op.drop_index("ix_scheduled_sessions_campaign_id", table_name="scheduled_sessions")
    op.drop_table("scheduled_sessions")
    op.drop_table("availability_slots")
    op.drop_index("ix_availability_records_campaign_id", table_name="availability_records")
    op.drop_index("ix_availability_records_username", table_name="availability_records")
    op.drop_table("availability_records")
    op.drop_table("campaign_members")
    op.drop_table("campaigns")
