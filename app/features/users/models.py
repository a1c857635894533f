"""
User model for the account store.
"""
from datetime import datetime
from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """
    A CMS account.

    Integer ids double as the report's sort order.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # User information
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    surname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    # Status flags
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Stamped on every authenticated request
    last_visited: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    groups: Mapped[list["Group"]] = relationship(  # type: ignore
        "Group",
        secondary="group_members",
        lazy="selectin"
    )

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.surname) if part)
        return name or self.email

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"
