"""Service layer for the course sections service."""

from coursesections.services.section_manager import SectionManager

__all__ = ["SectionManager"]
