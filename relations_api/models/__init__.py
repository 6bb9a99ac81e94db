"""ORM Models — SQLAlchemy declarative models for users, profiles, posts, categories.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root for Profile; Post and Category share a join table

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from relations_api.models.user import User  # noqa: F401
from relations_api.models.profile import Profile  # noqa: F401
from relations_api.models.post import Post  # noqa: F401
from relations_api.models.category import Category  # noqa: F401
from relations_api.models.post_category import post_categories  # noqa: F401
