"""Profile ORM — one-to-one extension of a User.

Invariants:
    - user_id is UNIQUE and non-nullable (cardinality 1)
    - A Profile never outlives its User (FK ON DELETE CASCADE as a last resort;
      the relationship manager deletes it explicitly first)
"""

from sqlalchemy import Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from relations_api.db.base import Base


class Profile(Base):
    """Free-text bio bound to exactly one User."""
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="profile")
