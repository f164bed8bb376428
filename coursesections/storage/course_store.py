"""Course store: persistence and renumbering primitives for course sections."""

import logging
from contextlib import contextmanager
from typing import Any, Generator, Optional

from sqlalchemy.orm import Session

from coursesections.formats import CourseFormat, get_course_format
from coursesections.models.course import Course
from coursesections.models.section import Section
from coursesections.storage.repositories import (
    CourseRepository,
    FormatOptionRepository,
    SectionRepository,
)

logger = logging.getLogger(__name__)

# Update payload keys written to section columns; everything else is a format option
SECTION_FIELDS = {
    "name": "name",
    "summary": "summary",
    "summaryformat": "summary_format",
    "visible": "visible",
    "availability": "availability",
}


class CourseStore:
    """
    Authoritative store for courses and their ordered sections.

    Every mutation keeps section positions of a course unique and contiguous
    from 0 to the last section number. Nothing here checks permissions.
    """

    def __init__(self, session: Session):
        """
        Initialize the store with a database session.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session
        self.course_repo = CourseRepository(session)
        self.section_repo = SectionRepository(session)
        self.option_repo = FormatOptionRepository(session)

    # Courses

    def get_course(self, course_id: int) -> Optional[Course]:
        return self.course_repo.get_by_id(course_id)

    def create_course(
        self,
        shortname: str,
        fullname: str = "",
        format: str = "topics",
        num_sections: int = 0,
    ) -> Course:
        """
        Create a course with its general section and `num_sections` numbered sections.

        Returns:
            Created course
        """
        course = self.course_repo.create(
            Course(shortname=shortname, fullname=fullname or shortname, format=format, marker=0)
        )
        for position in range(num_sections + 1):
            self.section_repo.create(Section(course_id=course.id, section=position))
        logger.info("Created course %s with %d sections", course.id, num_sections)
        return course

    def get_course_format(self, course: Course) -> CourseFormat:
        return get_course_format(course.format)

    def set_marker(self, course: Course, position: int) -> None:
        """Highlight the section at `position`; 0 clears the highlight."""
        course.marker = position
        self.course_repo.update(course)

    # Sections

    def get_sections(self, course: Course) -> list[Section]:
        """All sections of the course ordered by position."""
        return self.section_repo.get_by_course_id(course.id)

    def get_section_by_position(self, course: Course, position: int) -> Optional[Section]:
        return self.section_repo.get_by_position(course.id, position)

    def get_last_section_number(self, course: Course) -> int:
        return self.section_repo.get_last_section_number(course.id)

    def create_section(self, course: Course, position: int) -> Section:
        """
        Create an empty section at `position`.

        Sections at or after `position` move one place up. A position of 0 or
        beyond the last section appends.

        Returns:
            The new section, holding its position right after insertion
        """
        last = self.get_last_section_number(course)
        if position <= 0 or position > last:
            position = last + 1
        else:
            shifted = [
                (section, section.section + 1)
                for section in self.get_sections(course)
                if section.section >= position
            ]
            self.section_repo.renumber(shifted)
            if course.marker >= position:
                self.set_marker(course, course.marker + 1)

        section = self.section_repo.create(Section(course_id=course.id, section=position))
        logger.debug("Created section %s at position %d in course %s", section.id, position, course.id)
        return section

    def delete_section(self, section: Section) -> bool:
        """
        Delete a section and close the gap it leaves.

        The general section (position 0) is never deleted.

        Returns:
            True if the section was deleted
        """
        if section.section == 0:
            return False

        course = self.course_repo.get_by_id(section.course_id)
        position = section.section
        self.section_repo.delete(section)

        shifted = [
            (other, other.section - 1)
            for other in self.get_sections(course)
            if other.section > position
        ]
        self.section_repo.renumber(shifted)

        if course.marker == position:
            self.set_marker(course, 0)
        elif course.marker > position:
            self.set_marker(course, course.marker - 1)

        logger.debug("Deleted section at position %d in course %s", position, course.id)
        return True

    def move_section_to(self, course: Course, position: int, destination: int) -> bool:
        """
        Move the section at `position` so it ends at `destination`.

        Intervening sections shift by one. A destination beyond the last
        section moves to the end. The general section cannot be moved and
        nothing can be moved in front of it.

        Returns:
            True on success, False if the move is not possible
        """
        if position < 1 or destination < 1:
            return False

        sections = self.get_sections(course)
        last = sections[-1].section if sections else 0
        if position > last:
            return False
        destination = min(destination, last)
        if destination == position:
            return True

        moving = next((s for s in sections if s.section == position), None)
        if moving is None:
            return False
        ordered = [s for s in sections if s is not moving]
        ordered.insert(destination, moving)

        self.section_repo.renumber([(section, index) for index, section in enumerate(ordered)])
        self._follow_marker(course, position, destination)
        logger.debug(
            "Moved section from %d to %d in course %s", position, destination, course.id
        )
        return True

    def _follow_marker(self, course: Course, position: int, destination: int) -> None:
        """Keep the highlight on the same section after a move."""
        marker = course.marker
        if not marker:
            return
        if marker == position:
            self.set_marker(course, destination)
        elif position < marker <= destination:
            self.set_marker(course, marker - 1)
        elif destination <= marker < position:
            self.set_marker(course, marker + 1)

    def update_section(self, section: Section, data: dict[str, Any]) -> Section:
        """
        Apply an update payload to a section.

        Keys matching section fields update columns; all other keys are stored
        as format options of the course's current format.
        """
        course = self.course_repo.get_by_id(section.course_id)
        format_name = self.get_course_format(course).name
        for key, value in data.items():
            if key in SECTION_FIELDS:
                setattr(section, SECTION_FIELDS[key], value)
            else:
                self.option_repo.upsert(
                    section, format_name, key, None if value is None else str(value)
                )
        self.section_repo.update(section)
        return section

    def get_format_options(self, section: Section, course_format: CourseFormat) -> dict[str, Any]:
        """Format options of a section: declared defaults overlaid with stored values."""
        options = dict(course_format.section_format_options())
        for option in self.option_repo.get_for_section(section.id, course_format.name):
            options[option.name] = option.value
        return options

    # Transactions

    @contextmanager
    def savepoint(self) -> Generator[None, None, None]:
        """Run a block inside a SAVEPOINT; it is rolled back if the block raises."""
        with self.session.begin_nested():
            yield

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
