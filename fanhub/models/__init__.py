"""
SQLModel table models - database schema.

For modifications:
1. Edit the appropriate model file in fanhub/models/
2. Create an Alembic migration to reflect the changes
3. Use Alembic to manage all schema changes going forward
"""

from fanhub.models.comment import Comments
from fanhub.models.fanwork import Fanworks
from fanhub.models.interaction import Bookmarks, Likes
from fanhub.models.moderation_action import ModerationActions
from fanhub.models.report import Reports
from fanhub.models.tag import FanworkTags, Tags
from fanhub.models.user import Users

__all__ = [
    # Core entity models
    "Users",
    "Fanworks",
    "Tags",
    "Comments",
    # Junction/relationship tables
    "FanworkTags",
    "Likes",
    "Bookmarks",
    # Moderation
    "Reports",
    "ModerationActions",
]
