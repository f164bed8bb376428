"""Repository pattern implementation for data access layer."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from coursesections.models.access import CapabilityGrant, ServiceToken
from coursesections.models.course import Course
from coursesections.models.format_option import SectionFormatOption
from coursesections.models.section import Section


class CourseRepository:
    """Repository for course operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, course: Course) -> Course:
        """Create a new course."""
        self.session.add(course)
        self.session.flush()
        return course

    def get_by_id(self, course_id: int) -> Optional[Course]:
        """Get course by ID."""
        return self.session.get(Course, course_id)

    def update(self, course: Course) -> Course:
        """Flush pending changes of a course."""
        self.session.flush()
        return course


class SectionRepository:
    """Repository for section operations with position renumbering support."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, section: Section) -> Section:
        """Create a new section."""
        self.session.add(section)
        self.session.flush()
        return section

    def get_by_course_id(self, course_id: int) -> list[Section]:
        """Get all sections of a course ordered by position."""
        stmt = (
            select(Section)
            .where(Section.course_id == course_id)
            .order_by(Section.section)
        )
        return list(self.session.scalars(stmt))

    def get_by_position(self, course_id: int, position: int) -> Optional[Section]:
        """Get the section of a course at a position."""
        stmt = select(Section).where(
            and_(Section.course_id == course_id, Section.section == position)
        )
        return self.session.scalar(stmt)

    def get_last_section_number(self, course_id: int) -> int:
        """Highest position used in a course (0 when only the general section exists)."""
        stmt = select(func.max(Section.section)).where(Section.course_id == course_id)
        return self.session.scalar(stmt) or 0

    def update(self, section: Section) -> Section:
        """Flush pending changes of a section."""
        self.session.flush()
        return section

    def delete(self, section: Section) -> None:
        """Delete a section row."""
        self.session.delete(section)
        self.session.flush()

    def renumber(self, moves: list[tuple[Section, int]]) -> None:
        """
        Assign new positions to sections.

        Rows are first parked at distinct negative positions and flushed, then
        given their final positions, so (course_id, section) stays unique after
        every statement regardless of the order updates are emitted in.

        Args:
            moves: (section, new position) pairs. Final positions must not collide
                   with sections left untouched.
        """
        moves = [(section, position) for section, position in moves if section.section != position]
        if not moves:
            return

        for offset, (section, _) in enumerate(moves):
            section.section = -(offset + 1)
        self.session.flush()

        for section, position in moves:
            section.section = position
        self.session.flush()


class FormatOptionRepository:
    """Repository for per-section course format options."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def get_for_section(self, section_id: int, format_name: str) -> list[SectionFormatOption]:
        """Get stored options of a section for one course format."""
        stmt = (
            select(SectionFormatOption)
            .where(
                and_(
                    SectionFormatOption.section_id == section_id,
                    SectionFormatOption.format == format_name,
                )
            )
            .order_by(SectionFormatOption.name)
        )
        return list(self.session.scalars(stmt))

    def upsert(self, section: Section, format_name: str, name: str, value: str | None) -> SectionFormatOption:
        """Insert or overwrite a single option value."""
        stmt = select(SectionFormatOption).where(
            and_(
                SectionFormatOption.section_id == section.id,
                SectionFormatOption.format == format_name,
                SectionFormatOption.name == name,
            )
        )
        option = self.session.scalar(stmt)
        if option is None:
            option = SectionFormatOption(
                course_id=section.course_id,
                format=format_name,
                section_id=section.id,
                name=name,
                value=value,
            )
            self.session.add(option)
        else:
            option.value = value
        self.session.flush()
        return option


class AccessRepository:
    """Repository for service tokens and capability grants."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def get_token(self, token: str) -> Optional[ServiceToken]:
        """Get a service token record."""
        return self.session.get(ServiceToken, token)

    def create_token(self, token: ServiceToken) -> ServiceToken:
        """Store a service token."""
        self.session.add(token)
        self.session.flush()
        return token

    def has_grant(self, user_id: int, capability: str, course_id: int | None) -> bool:
        """Check for a grant in the course or a site-wide grant."""
        scope = CapabilityGrant.course_id.is_(None)
        if course_id is not None:
            scope = or_(scope, CapabilityGrant.course_id == course_id)
        stmt = select(func.count(CapabilityGrant.id)).where(
            and_(
                CapabilityGrant.user_id == user_id,
                CapabilityGrant.capability == capability,
                scope,
            )
        )
        return (self.session.scalar(stmt) or 0) > 0

    def add_grant(self, grant: CapabilityGrant) -> CapabilityGrant:
        """Store a capability grant."""
        self.session.add(grant)
        self.session.flush()
        return grant
