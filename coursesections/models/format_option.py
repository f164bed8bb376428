"""Per-section course format options."""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursesections.models.base import Base


class SectionFormatOption(Base):
    """A name/value option stored for a section under one course format."""

    __tablename__ = "course_format_options"
    __table_args__ = (
        UniqueConstraint("section_id", "format", "name", name="uq_section_format_option"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    format: Mapped[str] = mapped_column(String(21), nullable=False)
    section_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("course_sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    section: Mapped["Section"] = relationship("Section", back_populates="format_options")

    def __repr__(self) -> str:
        return f"<SectionFormatOption(section_id={self.section_id!r}, name={self.name!r})>"
