"""Section manager: create, delete, move, read and update the sections of a course."""

import logging
from typing import Callable, TypeVar

from coursesections.access import (
    CAP_MOVE_SECTIONS,
    CAP_SET_CURRENT_SECTION,
    CAP_UPDATE,
    CAP_VIEW,
    CAP_VIEW_HIDDEN_SECTIONS,
    AccessControl,
    Principal,
)
from coursesections.exceptions import (
    DatabaseError,
    InvalidCourseIdError,
    InvalidSectionNumberError,
    MoveFailedError,
    SectionNotFoundError,
    SectionServiceError,
    TooManySectionsError,
    UnsupportedFormatError,
)
from coursesections.formats import CourseFormat
from coursesections.models.course import Course
from coursesections.models.section import Section
from coursesections.services.section.records import (
    IDENTIFY_BY_ID,
    CreatedSection,
    DeletedSection,
    FormatOption,
    ItemResult,
    SectionFormatOptions,
    SectionInfo,
    SectionName,
    SectionUpdate,
    UpdateResult,
)
from coursesections.services.section.reordering import SectionReorderer
from coursesections.services.section.resolution import find_section, resolve_target_positions
from coursesections.services.section.validation import SectionValidator
from coursesections.storage.course_store import CourseStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SectionManager:
    """Service layer for the ordered section set of a course, acting for one principal."""

    def __init__(self, store: CourseStore, access: AccessControl, principal: Principal):
        """
        Initialize section manager with its collaborators.

        Args:
            store: Course store holding courses and sections
            access: Access control used for login and capability checks
            principal: User the calls are made on behalf of
        """
        self.store = store
        self.access = access
        self.principal = principal
        self.validator = SectionValidator()
        self.reorderer = SectionReorderer(store)

    def _prepare(self, course_id: int, *capabilities: str) -> tuple[Course, CourseFormat]:
        """
        Common preamble: course lookup, login gate, capabilities, format check.

        Raises:
            ValidationError: If course_id is invalid
            InvalidCourseIdError: If the course does not exist
            PermissionDeniedError: If the principal may not perform the call
            UnsupportedFormatError: If the course format does not use sections
            DatabaseError: If the course lookup fails
        """
        self.validator.validate_int(course_id, "courseid")
        course = self._query("get course", lambda: self.store.get_course(course_id))
        if course is None:
            raise InvalidCourseIdError(course_id)

        self.access.require_login(self.principal, course)
        for capability in capabilities:
            self.access.require_capability(self.principal, capability, course)

        course_format = self.store.get_course_format(course)
        if not course_format.uses_sections():
            raise UnsupportedFormatError(str(course_format))
        return course, course_format

    def _query(self, action: str, operation: Callable[[], T]) -> T:
        """Run a store read, wrapping unclassified failures as DatabaseError."""
        try:
            return operation()
        except SectionServiceError:
            raise
        except Exception as e:
            raise DatabaseError(f"Failed to {action}: {str(e)}", e) from e

    def _mutate(self, action: str, operation: Callable[[], T]) -> T:
        """Run a mutation, commit it, and roll back on any failure."""
        try:
            result = operation()
            self.store.commit()
            return result
        except SectionServiceError:
            self.store.rollback()
            raise
        except Exception as e:
            self.store.rollback()
            raise DatabaseError(f"Failed to {action}: {str(e)}", e) from e

    def create_sections(self, course_id: int, position: int, count: int = 1) -> list[CreatedSection]:
        """
        Create `count` sections at `position`.

        Args:
            course_id: Course ID
            position: Insert position; 0 appends to the end of the course
            count: Number of sections to create (default: 1)

        Returns:
            Created sections with their final positions, in creation order

        Raises:
            ValidationError: If position or count is invalid
            InvalidCourseIdError: If the course does not exist
            PermissionDeniedError: If update (or move, when inserting) is not allowed
            UnsupportedFormatError: If the course format does not use sections
            TooManySectionsError: If the course would exceed the format maximum
            DatabaseError: If the store fails
        """
        self.validator.validate_position(position)
        self.validator.validate_count(count)
        course, course_format = self._prepare(course_id, CAP_UPDATE)

        last = self._query("count sections", lambda: self.store.get_last_section_number(course))
        desired = last + count
        if desired > course_format.get_max_sections():
            raise TooManySectionsError(course_format.get_max_sections(), desired)

        if position > 0:
            # Inserting anywhere but the end moves existing sections
            self.access.require_capability(self.principal, CAP_MOVE_SECTIONS, course)

        created = self._mutate(
            "create sections",
            lambda: self.reorderer.create_sections(course, position, count),
        )
        logger.info("Created %d sections at %d in course %s", count, position, course_id)
        return created

    def delete_sections(
        self,
        course_id: int,
        positions: list[int] | None = None,
        section_ids: list[int] | None = None,
    ) -> list[DeletedSection]:
        """
        Delete sections by position and/or id.

        With both lists empty every section except the general one is deleted.
        Unknown positions and ids are ignored. Deletion runs from the highest
        position down so earlier deletions do not shift later targets.

        Returns:
            One record per targeted section, highest position first

        Raises:
            ValidationError: If the lists are malformed
            InvalidCourseIdError: If the course does not exist
            PermissionDeniedError: If update is not allowed
            UnsupportedFormatError: If the course format does not use sections
            DatabaseError: If the store fails
        """
        positions = positions or []
        section_ids = section_ids or []
        self.validator.validate_int_list(positions, "sectionnumbers")
        self.validator.validate_int_list(section_ids, "sectionids")
        course, course_format = self._prepare(course_id, CAP_UPDATE)

        sections = self._query("get sections", lambda: self.store.get_sections(course))
        by_position = {s.section: s for s in sections}
        targets = [
            p for p in resolve_target_positions(sections, positions, section_ids, include_general=False)
            if p != 0
        ]

        def delete_targets() -> list[DeletedSection]:
            results = []
            for position in reversed(targets):
                section = by_position[position]
                section_id = section.id
                name = course_format.get_section_name(section)
                deleted = self.store.delete_section(section)
                results.append(
                    DeletedSection(id=section_id, number=position, name=name, deleted=deleted)
                )
            return results

        results = self._mutate("delete sections", delete_targets)
        logger.info("Deleted sections %s in course %s", list(reversed(targets)), course_id)
        return results

    def move_section(self, course_id: int, position: int, new_position: int) -> None:
        """
        Move the section at `position` to `new_position`.

        Raises:
            ValidationError: If a position is malformed
            InvalidCourseIdError: If the course does not exist
            PermissionDeniedError: If update or move is not allowed
            UnsupportedFormatError: If the course format does not use sections
            InvalidSectionNumberError: If `position` is outside [0, last]
            MoveFailedError: If the store could not perform the move
        """
        self.validator.validate_int(position, "sectionnumber")
        self.validator.validate_int(new_position, "position")
        course, _ = self._prepare(course_id, CAP_UPDATE, CAP_MOVE_SECTIONS)

        last = self._query("count sections", lambda: self.store.get_last_section_number(course))
        if position < 0 or position > last:
            raise InvalidSectionNumberError(position, last)

        try:
            if not self.reorderer.move_section(course, position, new_position):
                raise MoveFailedError()
            self.store.commit()
        except MoveFailedError:
            self.store.rollback()
            raise
        except Exception as e:
            self.store.rollback()
            raise MoveFailedError() from e
        logger.info("Moved section %d to %d in course %s", position, new_position, course_id)

    def get_sections(
        self,
        course_id: int,
        positions: list[int] | None = None,
        section_ids: list[int] | None = None,
    ) -> list[SectionInfo]:
        """
        Full projections of sections, ascending by position.

        With both lists empty all sections including the general one are returned.
        """
        course, course_format, targets = self._read_targets(course_id, positions, section_ids)
        can_view_hidden = self.access.has_capability(self.principal, CAP_VIEW_HIDDEN_SECTIONS, course)

        return [
            SectionInfo(
                sectionnum=section.section,
                id=section.id,
                name=course_format.get_section_name(section),
                summary=section.summary,
                summaryformat=section.summary_format,
                visible=section.visible,
                uservisible=bool(section.visible) or can_view_hidden,
                availability=section.availability,
                highlighted=bool(course.marker) and course.marker == section.section,
                sequence=section.sequence,
                courseformat=course.format,
                sectionformatoptions=self._format_options(section, course_format),
            )
            for section in targets
        ]

    def get_section_names(
        self,
        course_id: int,
        positions: list[int] | None = None,
        section_ids: list[int] | None = None,
    ) -> list[SectionName]:
        """Position, id and display name of sections, ascending by position."""
        _, course_format, targets = self._read_targets(course_id, positions, section_ids)
        return [
            SectionName(sectionnum=s.section, id=s.id, name=course_format.get_section_name(s))
            for s in targets
        ]

    def get_section_format_options(
        self,
        course_id: int,
        positions: list[int] | None = None,
        section_ids: list[int] | None = None,
    ) -> list[SectionFormatOptions]:
        """Position, id and format options of sections, ascending by position."""
        _, course_format, targets = self._read_targets(course_id, positions, section_ids)
        return [
            SectionFormatOptions(
                sectionnum=s.section,
                id=s.id,
                sectionformatoptions=self._format_options(s, course_format),
            )
            for s in targets
        ]

    def _read_targets(
        self,
        course_id: int,
        positions: list[int] | None,
        section_ids: list[int] | None,
    ) -> tuple[Course, CourseFormat, list[Section]]:
        positions = positions or []
        section_ids = section_ids or []
        self.validator.validate_int_list(positions, "sectionnumbers")
        self.validator.validate_int_list(section_ids, "sectionids")
        course, course_format = self._prepare(course_id, CAP_VIEW)

        sections = self._query("get sections", lambda: self.store.get_sections(course))
        wanted = set(resolve_target_positions(sections, positions, section_ids, include_general=True))
        return course, course_format, [s for s in sections if s.section in wanted]

    def _format_options(self, section: Section, course_format: CourseFormat) -> list[FormatOption]:
        options = self.store.get_format_options(section, course_format)
        return [
            FormatOption(name=name, value=None if value is None else str(value))
            for name, value in options.items()
        ]

    def update_sections(self, course_id: int, items: list[SectionUpdate]) -> UpdateResult:
        """
        Update name, summary, visibility, highlight and format options of sections.

        Each item is applied on its own. A failing item produces a warning and
        leaves no partial changes; the remaining items are still applied.

        Returns:
            Update result with one warning per failed item

        Raises:
            InvalidCourseIdError: If the course does not exist
            PermissionDeniedError: If update is not allowed
            UnsupportedFormatError: If the course format does not use sections
            DatabaseError: If committing the batch fails
        """
        course, _ = self._prepare(course_id, CAP_UPDATE)
        sections = self._query("get sections", lambda: self.store.get_sections(course))

        results = [self._update_one(course, sections, item) for item in items]
        warnings = [r.to_warning() for r in results if not r.ok]
        for warning in warnings:
            logger.warning(
                "Section update failed in course %s (section %s, id %s): %s",
                course_id, warning.sectionnumber, warning.sectionid, warning.message,
            )

        try:
            self.store.commit()
        except Exception as e:
            self.store.rollback()
            raise DatabaseError(f"Failed to update sections: {str(e)}", e) from e
        logger.info(
            "Updated %d of %d sections in course %s",
            len(items) - len(warnings), len(items), course_id,
        )
        return UpdateResult(warnings=warnings)

    def update_section_names(self, course_id: int, items: list[SectionUpdate]) -> UpdateResult:
        """Rename sections. Only the name of each item is applied."""
        return self.update_sections(
            course_id,
            [SectionUpdate(section=i.section, type=i.type, name=i.name) for i in items],
        )

    def update_section_format_options(self, course_id: int, items: list[SectionUpdate]) -> UpdateResult:
        """Set format options of sections. Only the options of each item are applied."""
        return self.update_sections(
            course_id,
            [
                SectionUpdate(section=i.section, type=i.type, sectionformatoptions=i.sectionformatoptions)
                for i in items
            ],
        )

    def _update_one(self, course: Course, sections: list[Section], item: SectionUpdate) -> ItemResult:
        section = find_section(sections, item.type, item.section)
        if section is not None:
            result = ItemResult(sectionnumber=section.section, sectionid=section.id)
        elif item.type == IDENTIFY_BY_ID:
            result = ItemResult(sectionnumber=None, sectionid=item.section)
        else:
            result = ItemResult(sectionnumber=item.section, sectionid=None)

        try:
            self.validator.validate_update(item)
            if section is None:
                raise SectionNotFoundError(item.section)

            with self.store.savepoint():
                if item.highlight is not None:
                    self.access.require_capability(self.principal, CAP_SET_CURRENT_SECTION, course)
                    if item.highlight == 1 and course.marker != section.section:
                        self.store.set_marker(course, section.section)
                    elif item.highlight == 0 and course.marker == section.section:
                        self.store.set_marker(course, 0)

                data = item.payload()
                if data:
                    self.store.update_section(section, data)
        except Exception as e:
            return result.failed(e)
        return result
