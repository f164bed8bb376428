"""Basic tests for database schema."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

pytestmark = pytest.mark.unit

from coursesections.models.access import CapabilityGrant, ServiceToken
from coursesections.models.course import Course
from coursesections.models.format_option import SectionFormatOption
from coursesections.models.section import FORMAT_HTML, Section


def test_create_course_with_sections(temp_db):
    """Test creating a course and its sections."""
    with temp_db.session() as session:
        course = Course(shortname="C1", fullname="Course 1")
        session.add(course)
        session.flush()

        session.add_all([Section(course_id=course.id, section=n) for n in range(3)])
        session.commit()

        retrieved = session.get(Course, course.id)
        assert retrieved.format == "topics"
        assert retrieved.marker == 0
        assert [s.section for s in retrieved.sections] == [0, 1, 2]


def test_section_defaults(temp_db):
    """Test column defaults of a new section."""
    with temp_db.session() as session:
        course = Course(shortname="C1")
        session.add(course)
        session.flush()

        section = Section(course_id=course.id, section=0)
        session.add(section)
        session.commit()

        assert section.name is None
        assert section.summary == ""
        assert section.summary_format == FORMAT_HTML
        assert section.visible == 1
        assert section.sequence == ""
        assert section.created_at is not None


def test_section_position_is_unique_per_course(temp_db):
    """Two sections of one course cannot share a position."""
    with temp_db.session() as session:
        course = Course(shortname="C1")
        other = Course(shortname="C2")
        session.add_all([course, other])
        session.flush()

        # The same position in another course is fine
        session.add(Section(course_id=course.id, section=1))
        session.add(Section(course_id=other.id, section=1))
        session.flush()

        session.add(Section(course_id=course.id, section=1))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()


def test_deleting_course_cascades(temp_db):
    """Sections and their format options go with the course."""
    with temp_db.session() as session:
        course = Course(shortname="C1")
        session.add(course)
        session.flush()
        section = Section(course_id=course.id, section=1)
        session.add(section)
        session.flush()
        session.add(
            SectionFormatOption(
                course_id=course.id, format="topics", section_id=section.id, name="layout", value="1"
            )
        )
        session.commit()

        session.delete(course)
        session.commit()

        assert session.scalars(select(Section)).all() == []
        assert session.scalars(select(SectionFormatOption)).all() == []


def test_format_option_unique_per_section_and_format(temp_db):
    """An option name is stored once per section and format."""
    with temp_db.session() as session:
        course = Course(shortname="C1")
        session.add(course)
        session.flush()
        section = Section(course_id=course.id, section=1)
        session.add(section)
        session.flush()

        session.add(SectionFormatOption(course_id=course.id, format="topics", section_id=section.id, name="a"))
        session.add(SectionFormatOption(course_id=course.id, format="weeks", section_id=section.id, name="a"))
        session.flush()

        session.add(SectionFormatOption(course_id=course.id, format="topics", section_id=section.id, name="a"))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()


def test_tokens_and_grants(temp_db):
    """Test storing a token and a site-wide grant."""
    with temp_db.session() as session:
        session.add(ServiceToken(token="abc", user_id=7))
        session.add(CapabilityGrant(user_id=7, course_id=None, capability="moodle/course:view"))
        session.commit()

        token = session.get(ServiceToken, "abc")
        assert token.enabled is True
        grant = session.scalars(select(CapabilityGrant)).one()
        assert grant.course_id is None
