"""create users and dms

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-19 09:12:40.118230

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d1b04"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Enum values match Python enum string values
    platform_enum = sa.Enum("X", "LinkedIn", name="platform")
    dmstatus_enum = sa.Enum("Waiting", "In Conversation", "Won", "Lost", name="dmstatus")

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.Column(
            "email_reminders_enabled", sa.Boolean(), server_default=sa.true(), nullable=False
        ),
        sa.Column("onboarded", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("last_reminder_sent_on", sa.Date(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(
        op.f("ix_users_email_reminders_enabled"),
        "users",
        ["email_reminders_enabled"],
        unique=False,
    )

    op.create_table(
        "dms",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("platform", platform_enum, nullable=False),
        sa.Column("sent_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("followup_date", sa.Date(), nullable=False),
        sa.Column("status", dmstatus_enum, nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_dms_id"), "dms", ["id"], unique=False)
    op.create_index(op.f("ix_dms_user_id"), "dms", ["user_id"], unique=False)
    op.create_index(op.f("ix_dms_followup_date"), "dms", ["followup_date"], unique=False)
    op.create_index(op.f("ix_dms_status"), "dms", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_dms_status"), table_name="dms")
    op.drop_index(op.f("ix_dms_followup_date"), table_name="dms")
    op.drop_index(op.f("ix_dms_user_id"), table_name="dms")
    op.drop_index(op.f("ix_dms_id"), table_name="dms")
    op.drop_table("dms")
    sa.Enum(name="dmstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="platform").drop(op.get_bind(), checkfirst=True)

    op.drop_index(op.f("ix_users_email_reminders_enabled"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
