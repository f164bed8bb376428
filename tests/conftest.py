"""Shared pytest fixtures for course sections tests."""

import os
import tempfile
from typing import Generator

import pytest

from coursesections.access import CAP_UPDATE, CAP_VIEW, CAPABILITIES, AccessControl
from coursesections.services.section_manager import SectionManager
from coursesections.storage.course_store import CourseStore
from coursesections.storage.database import Database, reset_db

INSTRUCTOR_ID = 1
STUDENT_ID = 2
EDITOR_ID = 3
OUTSIDER_ID = 4

INSTRUCTOR_TOKEN = "instructor-token"
STUDENT_TOKEN = "student-token"
EDITOR_TOKEN = "editor-token"
OUTSIDER_TOKEN = "outsider-token"


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Database instance with tables created
    """
    # Create temporary database file
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Reset global database instance
    reset_db()

    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    # Cleanup
    database.drop_tables()
    database.engine.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


def seed_users(access: AccessControl) -> None:
    """
    Create the test users and their tokens.

    instructor: every capability site-wide
    student: may enter courses only
    editor: may enter and update courses but not move sections or highlight
    outsider: valid token, no capabilities
    """
    access.issue_token(INSTRUCTOR_ID, INSTRUCTOR_TOKEN)
    for capability in CAPABILITIES:
        access.grant(INSTRUCTOR_ID, capability)

    access.issue_token(STUDENT_ID, STUDENT_TOKEN)
    access.grant(STUDENT_ID, CAP_VIEW)

    access.issue_token(EDITOR_ID, EDITOR_TOKEN)
    access.grant(EDITOR_ID, CAP_VIEW)
    access.grant(EDITOR_ID, CAP_UPDATE)

    access.issue_token(OUTSIDER_ID, OUTSIDER_TOKEN)


@pytest.fixture
def db_session(temp_db):
    """Get a database session from temp_db."""
    with temp_db.session() as session:
        yield session


@pytest.fixture
def store(db_session):
    """Course store bound to the test session."""
    return CourseStore(db_session)


@pytest.fixture
def access(db_session):
    """Access control with the test users seeded."""
    access = AccessControl(db_session)
    seed_users(access)
    db_session.commit()
    return access


@pytest.fixture
def manager_for(store, access):
    """Build a section manager acting for the user behind a token."""

    def build(token: str) -> SectionManager:
        return SectionManager(store, access, access.authenticate(token))

    return build


@pytest.fixture
def manager(manager_for):
    """Section manager acting for the instructor."""
    return manager_for(INSTRUCTOR_TOKEN)


@pytest.fixture
def course_factory(store):
    """Create committed courses with a given number of numbered sections."""

    def create(num_sections: int = 5, format: str = "topics"):
        course = store.create_course(f"C{num_sections}", format=format, num_sections=num_sections)
        store.commit()
        return course

    return create


@pytest.fixture
def course(course_factory):
    """A topics course with the general section and sections 1-5."""
    return course_factory(5)


def positions_by_id(store: CourseStore, course) -> dict[int, int]:
    """Map of section id to position for a course."""
    return {s.id: s.section for s in store.get_sections(course)}


def ids_in_order(store: CourseStore, course) -> list[int]:
    """Section ids of a course ordered by position."""
    return [s.id for s in store.get_sections(course)]
