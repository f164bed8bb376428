"""Course format policies.

A course format decides whether a course is organised in sections, how many
sections it may hold, which per-section options it understands and how a
section without an explicit name is displayed.
"""

from typing import Any

from coursesections.config import get_settings
from coursesections.models.section import Section


class CourseFormat:
    """Base course format. Subclasses override the class attributes."""

    name = "base"
    uses_sections_flag = True
    section_label = "Section"

    def __init__(self, max_sections: int | None = None):
        if max_sections is None:
            max_sections = get_settings().max_sections
        self.max_sections = max_sections

    def uses_sections(self) -> bool:
        return self.uses_sections_flag

    def get_max_sections(self) -> int:
        return self.max_sections

    def section_format_options(self) -> dict[str, Any]:
        """Option names this format understands, with their default values."""
        return {}

    def get_default_section_name(self, section: Section) -> str:
        if section.section == 0:
            return "General"
        return f"{self.section_label} {section.section}"

    def get_section_name(self, section: Section) -> str:
        """Display name: the stored name if set, otherwise the format default."""
        if section.name:
            return section.name
        return self.get_default_section_name(section)

    def __str__(self) -> str:
        return self.name


class TopicsFormat(CourseFormat):
    name = "topics"
    section_label = "Topic"


class WeeksFormat(CourseFormat):
    name = "weeks"
    section_label = "Week"


class SocialFormat(CourseFormat):
    name = "social"
    uses_sections_flag = False


class SingleActivityFormat(CourseFormat):
    name = "singleactivity"
    uses_sections_flag = False


COURSE_FORMATS: dict[str, type[CourseFormat]] = {
    "topics": TopicsFormat,
    "weeks": WeeksFormat,
    "social": SocialFormat,
    "singleactivity": SingleActivityFormat,
}

DEFAULT_FORMAT = "topics"


def get_course_format(format_name: str, max_sections: int | None = None) -> CourseFormat:
    """
    Resolve a course format by name.

    Unknown names fall back to the default format.

    Args:
        format_name: Format identifier stored on the course
        max_sections: Optional override of the configured maximum section number

    Returns:
        Course format instance
    """
    format_cls = COURSE_FORMATS.get(format_name, COURSE_FORMATS[DEFAULT_FORMAT])
    return format_cls(max_sections)
