"""Section insertion and move operations."""

import logging

from coursesections.models.course import Course
from coursesections.services.section.records import CreatedSection
from coursesections.storage.course_store import CourseStore

logger = logging.getLogger(__name__)


def insertion_base(position: int, last_section_number: int) -> int:
    """Position new sections are inserted at; 0 or past the end means append."""
    if position <= 0 or position > last_section_number:
        return last_section_number + 1
    return position


class SectionReorderer:
    """Handles section insertion and moves against the course store."""

    def __init__(self, store: CourseStore):
        """
        Initialize reorderer with the course store.

        Args:
            store: Course store performing the renumbering
        """
        self.store = store

    def create_sections(self, course: Course, position: int, count: int) -> list[CreatedSection]:
        """
        Insert `count` sections at `position`.

        Every section is inserted at the same base position, so each insertion
        pushes the ones created before it one place further. The i-th created
        section (1-indexed) therefore ends at base + count - i.

        Args:
            course: Course to insert into
            position: Requested position, 0 to append
            count: Number of sections to create

        Returns:
            Created sections with their final positions, in creation order
        """
        base = insertion_base(position, self.store.get_last_section_number(course))
        created = []
        for i in range(1, count + 1):
            section = self.store.create_section(course, base)
            created.append(CreatedSection(sectionid=section.id, sectionnumber=section.section + count - i))
        logger.debug("Inserted %d sections at %d in course %s", count, base, course.id)
        return created

    def move_section(self, course: Course, position: int, new_position: int) -> bool:
        """
        Move the section at `position` to `new_position`.

        Positions beyond the last section move to the end.

        Returns:
            True if the store performed the move
        """
        return self.store.move_section_to(course, position, new_position)
