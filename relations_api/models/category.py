"""Category ORM — globally unique name, many-to-many with Post.

Invariants:
    - name is UNIQUE (upsert-by-name never duplicates a row)
    - Lifecycle independent of any Post
"""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from relations_api.db.base import Base
from relations_api.models.post_category import post_categories


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    posts: Mapped[list["Post"]] = relationship(
        "Post", secondary=post_categories, back_populates="categories",
        passive_deletes=True,
    )
