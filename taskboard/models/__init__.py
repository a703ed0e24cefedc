# taskboard/models/__init__.py
# Importing this package registers every table on Base.metadata.

from taskboard.models.user import User  # noqa: F401
from taskboard.models.project import Project  # noqa: F401
from taskboard.models.category import Category  # noqa: F401
from taskboard.models.task import Task  # noqa: F401
from taskboard.models.comment import Comment  # noqa: F401
from taskboard.models.calendar_event import CalendarEvent  # noqa: F401
from taskboard.models.notification import Notification  # noqa: F401
from taskboard.models.stored_file import StoredFile  # noqa: F401
