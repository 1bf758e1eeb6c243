"""Initialize chat, translation and guest lifecycle tables

Revision ID: initialize_database
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "initialize_database"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("preferred_language", sa.String(16), nullable=False, server_default="en"),
        sa.Column("qr_slug", sa.String(64), nullable=True),
        sa.Column("qr_rotated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_guest_hours", sa.Integer(), nullable=False, server_default="4"),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_qr_slug", "profiles", ["qr_slug"], unique=True)

    op.create_table(
        "guest_invites",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("inviter_id", sa.UUID(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_uses", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("used_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.ForeignKeyConstraint(["inviter_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint("used_count <= max_uses", name="ck_guest_invites_used_le_max"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_guest_invites_token", "guest_invites", ["token"], unique=True)
    op.create_index("ix_guest_invites_inviter_id", "guest_invites", ["inviter_id"])

    op.create_table(
        "guest_sessions",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("preferred_language", sa.String(16), nullable=False, server_default="en"),
        sa.Column("invite_id", sa.UUID(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "last_active_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["invite_id"], ["guest_invites.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "chats",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="direct"),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("created_by", sa.UUID(), nullable=True),
        sa.Column("is_ephemeral", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("delete_after", sa.DateTime(timezone=True), nullable=True),
        sa.Column("guest_session_id", sa.UUID(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["guest_session_id"], ["guest_sessions.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chats_created_by", "chats", ["created_by"])
    op.create_index(
        "ix_chats_ephemeral_delete_after", "chats", ["is_ephemeral", "delete_after"]
    )

    op.create_table(
        "chat_participants",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("chat_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("chat_id", "user_id", name="uq_chat_participants_chat_user"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chat_participants_chat_id", "chat_participants", ["chat_id"])
    op.create_index("ix_chat_participants_user_id", "chat_participants", ["user_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("chat_id", sa.UUID(), nullable=False),
        sa.Column("sender_id", sa.UUID(), nullable=False),
        sa.Column("sender_type", sa.String(16), nullable=False, server_default="user"),
        sa.Column("original_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("source_language", sa.String(16), nullable=False),
        sa.Column("attachment_url", sa.String(1024), nullable=True),
        sa.Column("attachment_type", sa.String(128), nullable=True),
        sa.Column("reply_to_id", sa.UUID(), nullable=True),
        sa.Column("edited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reply_to_id"], ["messages.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_messages_chat_id_created_at", "messages", ["chat_id", "created_at"]
    )

    op.create_table(
        "message_reactions",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("message_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("reaction", sa.String(32), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["message_id"], ["messages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_message_reactions_message_id", "message_reactions", ["message_id"]
    )

    op.create_table(
        "message_read_receipts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("message_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["message_id"], ["messages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_message_read_receipts_message_id", "message_read_receipts", ["message_id"]
    )

    op.create_table(
        "message_translations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("message_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("target_language", sa.String(16), nullable=False),
        sa.Column("translated_text", sa.Text(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["message_id"], ["messages.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "message_id",
            "user_id",
            "target_language",
            name="uq_message_translations_message_user_language",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_message_translations_message_id", "message_translations", ["message_id"]
    )
    op.create_index(
        "ix_message_translations_user_id", "message_translations", ["user_id"]
    )

    op.create_table(
        "translation_cache",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("hash", sa.String(64), nullable=False),
        sa.Column("source_lang", sa.String(16), nullable=False),
        sa.Column("target_lang", sa.String(16), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("translated_text", sa.Text(), nullable=False),
        sa.Column(
            "last_used",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_translation_cache_hash", "translation_cache", ["hash"], unique=True)

    op.create_table(
        "qr_rate_limits",
        sa.Column("inviter_id", sa.UUID(), nullable=False),
        sa.Column("minute_bucket", sa.DateTime(timezone=True), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("inviter_id", "minute_bucket"),
    )


def downgrade() -> None:
    op.drop_table("qr_rate_limits")
    op.drop_index("ix_translation_cache_hash", table_name="translation_cache")
    op.drop_table("translation_cache")
    op.drop_index("ix_message_translations_user_id", table_name="message_translations")
    op.drop_index(
        "ix_message_translations_message_id", table_name="message_translations"
    )
    op.drop_table("message_translations")
    op.drop_index(
        "ix_message_read_receipts_message_id", table_name="message_read_receipts"
    )
    op.drop_table("message_read_receipts")
    op.drop_index("ix_message_reactions_message_id", table_name="message_reactions")
    op.drop_table("message_reactions")
    op.drop_index("ix_messages_chat_id_created_at", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_chat_participants_user_id", table_name="chat_participants")
    op.drop_index("ix_chat_participants_chat_id", table_name="chat_participants")
    op.drop_table("chat_participants")
    op.drop_index("ix_chats_ephemeral_delete_after", table_name="chats")
    op.drop_index("ix_chats_created_by", table_name="chats")
    op.drop_table("chats")
    op.drop_table("guest_sessions")
    op.drop_index("ix_guest_invites_inviter_id", table_name="guest_invites")
    op.drop_index("ix_guest_invites_token", table_name="guest_invites")
    op.drop_table("guest_invites")
    op.drop_index("ix_profiles_qr_slug", table_name="profiles")
    op.drop_table("profiles")
