"""User ORM — aggregate root owning one Profile and many Posts.

Invariants:
    - email is unique and non-nullable
    - At most one Profile per User (enforced by profiles.user_id UNIQUE)
    - posts ordered by creation (id order)
    - posts load only when a read asks for them (lazy="raise" otherwise)

Design Decisions:
    - No ORM delete cascade: profile cleanup is an explicit relationship-manager
      step and the posts FK blocks deletion of a user that still owns posts
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from relations_api.db.base import Base


class User(Base):
    """User aggregate root."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    profile: Mapped["Profile | None"] = relationship(
        "Profile", back_populates="user", uselist=False, lazy="selectin",
    )
    posts: Mapped[list["Post"]] = relationship(
        "Post", back_populates="user", order_by="Post.id", lazy="raise",
    )
