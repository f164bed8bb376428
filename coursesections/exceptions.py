"""Custom exceptions for course section operations."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes reported to callers and in batch warnings."""

    INVALID_COURSE_ID = "invalidcourseid"
    UNSUPPORTED_FORMAT = "courseformatwithoutsections"
    TOO_MANY_SECTIONS = "toomanysections"
    INVALID_SECTION_NUMBER = "invalidsectionnumber"
    SECTION_NOT_FOUND = "sectionnotfound"
    MOVE_FAILED = "movesectionerror"
    NO_PERMISSIONS = "nopermissions"
    INVALID_TOKEN = "invalidtoken"
    REQUIRE_LOGIN = "requireloginerror"
    INVALID_PARAMETER = "invalidparameter"
    DATABASE_ERROR = "dberror"


class SectionServiceError(Exception):
    """Base exception for course section errors."""

    code: ErrorCode = ErrorCode.DATABASE_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class ValidationError(SectionServiceError):
    """Raised when input validation fails."""

    code = ErrorCode.INVALID_PARAMETER

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidCourseIdError(SectionServiceError):
    """Raised when the course does not exist."""

    code = ErrorCode.INVALID_COURSE_ID

    def __init__(self, course_id: int):
        super().__init__(f"You are trying to use an invalid course ID ({course_id})")
        self.course_id = course_id


class UnsupportedFormatError(SectionServiceError):
    """Raised when the course format does not use sections."""

    code = ErrorCode.UNSUPPORTED_FORMAT

    def __init__(self, format_name: str):
        super().__init__(f"Course format {format_name} does not use sections")
        self.format_name = format_name


class TooManySectionsError(SectionServiceError):
    """Raised when creating sections would exceed the format maximum."""

    code = ErrorCode.TOO_MANY_SECTIONS

    def __init__(self, max_sections: int, desired: int):
        super().__init__(
            "You are trying to create too many sections. "
            f"Allowed: {max_sections}, desired: {desired}"
        )
        self.max_sections = max_sections
        self.desired = desired


class InvalidSectionNumberError(SectionServiceError):
    """Raised when a position lies outside [0, last section number]."""

    code = ErrorCode.INVALID_SECTION_NUMBER

    def __init__(self, section_number: int, last_section_number: int):
        super().__init__(
            f"A section with sectionnumber {section_number} does not exist. "
            f"The highest sectionnumber is {last_section_number}."
        )
        self.section_number = section_number
        self.last_section_number = last_section_number


class SectionNotFoundError(SectionServiceError):
    """Raised when a section lookup by position or id misses."""

    code = ErrorCode.SECTION_NOT_FOUND

    def __init__(self, value: int):
        super().__init__(f"A section with the desired number/id ({value}) not found.")
        self.value = value


class MoveFailedError(SectionServiceError):
    """Raised when the store could not move a section."""

    code = ErrorCode.MOVE_FAILED

    def __init__(self, message: str = "Moving the section raised an unknown error"):
        super().__init__(message)


class PermissionDeniedError(SectionServiceError):
    """Raised by access control when the principal lacks a capability."""

    code = ErrorCode.NO_PERMISSIONS

    def __init__(self, message: str, capability: str | None = None, code: ErrorCode | None = None):
        super().__init__(message, code)
        self.capability = capability


class DatabaseError(SectionServiceError):
    """Raised when a database operation fails."""

    code = ErrorCode.DATABASE_ERROR

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
