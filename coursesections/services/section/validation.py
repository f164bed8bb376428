"""Section validation logic."""

from typing import Any

from coursesections.exceptions import ValidationError
from coursesections.models.section import (
    FORMAT_HTML,
    FORMAT_MARKDOWN,
    FORMAT_MOODLE,
    FORMAT_PLAIN,
)
from coursesections.services.section.records import (
    IDENTIFY_BY_ID,
    IDENTIFY_BY_NUMBER,
    SectionUpdate,
)
from coursesections.storage.course_store import SECTION_FIELDS


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class SectionValidator:
    """Validates section request data according to business rules."""

    # Validation constants
    NAME_MAX_LENGTH = 255
    OPTION_NAME_MAX_LENGTH = 100
    TEXT_FORMATS = (FORMAT_MOODLE, FORMAT_HTML, FORMAT_PLAIN, FORMAT_MARKDOWN)

    @staticmethod
    def validate_int(value: int, field: str) -> None:
        """
        Validate an integer parameter.

        Raises:
            ValidationError: If value is not an integer
        """
        if not _is_int(value):
            raise ValidationError(f"{field} must be an integer", field)

    @staticmethod
    def validate_position(position: int, field: str = "position") -> None:
        """
        Validate a section position.

        Raises:
            ValidationError: If position is not a non-negative integer
        """
        if not _is_int(position) or position < 0:
            raise ValidationError(f"{field} must be a non-negative integer", field)

    @staticmethod
    def validate_count(count: int) -> None:
        """
        Validate the number of sections to create.

        Raises:
            ValidationError: If count is smaller than 1
        """
        if not _is_int(count) or count < 1:
            raise ValidationError("number must be at least 1", "number")

    @staticmethod
    def validate_int_list(values: list[int], field: str) -> None:
        """
        Validate a list of positions or ids.

        Raises:
            ValidationError: If values is not a list of integers
        """
        if not isinstance(values, list) or not all(_is_int(v) for v in values):
            raise ValidationError(f"{field} must be a list of integers", field)

    @staticmethod
    def validate_update(item: SectionUpdate) -> None:
        """
        Validate one item of a batch update.

        Raises:
            ValidationError: If any field of the item is invalid
        """
        if item.type not in (IDENTIFY_BY_NUMBER, IDENTIFY_BY_ID):
            raise ValidationError("type must be 'num' or 'id'", "type")
        if not _is_int(item.section):
            raise ValidationError("section must be an integer", "section")
        if item.name is not None:
            if not isinstance(item.name, str):
                raise ValidationError("Name must be a string", "name")
            if len(item.name) > SectionValidator.NAME_MAX_LENGTH:
                raise ValidationError(
                    f"Name must be at most {SectionValidator.NAME_MAX_LENGTH} characters", "name"
                )
        if item.summary is not None and not isinstance(item.summary, str):
            raise ValidationError("Summary must be a string", "summary")
        if item.summaryformat is not None and item.summaryformat not in SectionValidator.TEXT_FORMATS:
            raise ValidationError("Unknown summary format", "summaryformat")
        for field in ("visible", "highlight"):
            value = getattr(item, field)
            if value is not None and value not in (0, 1):
                raise ValidationError(f"{field} must be 0 or 1", field)
        for option in item.sectionformatoptions:
            if not isinstance(option.name, str) or not option.name.strip():
                raise ValidationError("Format option name cannot be empty", "sectionformatoptions")
            if len(option.name) > SectionValidator.OPTION_NAME_MAX_LENGTH:
                raise ValidationError(
                    f"Format option name must be at most "
                    f"{SectionValidator.OPTION_NAME_MAX_LENGTH} characters",
                    "sectionformatoptions",
                )
            if option.name in SECTION_FIELDS:
                raise ValidationError(
                    f"Format option name {option.name!r} is reserved for a section field",
                    "sectionformatoptions",
                )
