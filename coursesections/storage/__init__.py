"""Storage layer for the course sections service."""

from coursesections.storage.course_store import CourseStore
from coursesections.storage.database import Database, get_db
from coursesections.storage.repositories import (
    AccessRepository,
    CourseRepository,
    FormatOptionRepository,
    SectionRepository,
)

__all__ = [
    "Database",
    "get_db",
    "CourseStore",
    "CourseRepository",
    "SectionRepository",
    "FormatOptionRepository",
    "AccessRepository",
]
