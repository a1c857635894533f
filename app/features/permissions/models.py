"""
Group and Permission models for the CMS security model.

- Groups form a tree through parent_id
- Users join groups through group_members
- Permission rows grant or deny a code to either a group or a single user
"""
from datetime import datetime
from sqlalchemy import String, ForeignKey, Table, Column, Text, Integer, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin


# ============================================================================
# Association Tables
# ============================================================================

group_members = Table(
    "group_members",
    Base.metadata,
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("joined_at", DateTime(timezone=True), nullable=False, default=datetime.now),
)


# ============================================================================
# Core Models
# ============================================================================

PERMISSION_GRANT = 1
PERMISSION_DENY = 0


class Group(Base, TimestampMixin):
    """
    Security group.

    Titles are entered by administrators and may carry inline markup.
    Examples: Administrators, Content Authors, Content Authors » News Desk
    """
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, title={self.title!r}, parent_id={self.parent_id})>"


class Permission(Base, TimestampMixin):
    """
    Assignment of a permission code to a group or directly to a user.

    type is PERMISSION_GRANT or PERMISSION_DENY; a deny removes the code from the
    effective set even when another scope grants it.
    """
    __tablename__ = "permissions"
    __table_args__ = (
        CheckConstraint(
            "(group_id IS NULL) <> (user_id IS NULL)",
            name="ck_permissions_single_scope",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    code: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    type: Mapped[int] = mapped_column(Integer, default=PERMISSION_GRANT, nullable=False)

    group_id: Mapped[int | None] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    def __repr__(self) -> str:
        scope = f"group={self.group_id}" if self.group_id is not None else f"user={self.user_id}"
        return f"<Permission(id={self.id}, code={self.code!r}, {scope}, type={self.type})>"
