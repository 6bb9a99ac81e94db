"""Post ORM — many Posts per User, many Categories per Post.

Invariants:
    - user_id must reference an existing User (FK, no ON DELETE action)
    - categories ordered by id; link rows removed with the post (join FK cascade)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from relations_api.db.base import Base
from relations_api.models.post_category import post_categories


class Post(Base):
    """Post owned loosely by a User."""
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="posts")
    categories: Mapped[list["Category"]] = relationship(
        "Category", secondary=post_categories, back_populates="posts",
        order_by="Category.id", lazy="selectin", passive_deletes=True,
    )
