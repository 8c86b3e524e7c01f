"""Database model exports."""

from .lesson import Lesson
from .progress import Progress
from .user import User

__all__ = ["Lesson", "Progress", "User"]
