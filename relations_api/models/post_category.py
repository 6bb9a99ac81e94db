"""PostCategory join table — the (post_id, category_id) pair is the only state.

Invariants:
    - Composite primary key: no duplicate pairs
    - Both FKs ON DELETE CASCADE: removing either endpoint drops its links
"""

from sqlalchemy import Column, ForeignKey, Integer, Table

from relations_api.db.base import Base

post_categories = Table(
    "post_categories",
    Base.metadata,
    Column(
        "post_id", Integer,
        ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "category_id", Integer,
        ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True,
    ),
)
