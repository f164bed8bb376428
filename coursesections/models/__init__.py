"""Database models for the course sections service."""

from coursesections.models.access import CapabilityGrant, ServiceToken
from coursesections.models.course import Course
from coursesections.models.format_option import SectionFormatOption
from coursesections.models.section import Section

__all__ = ["Course", "Section", "SectionFormatOption", "ServiceToken", "CapabilityGrant"]
