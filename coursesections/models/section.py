"""Section model for the ordered sections of a course."""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursesections.models.base import Base, TimestampMixin

# Text formats understood by summary_format
FORMAT_MOODLE = 0
FORMAT_HTML = 1
FORMAT_PLAIN = 2
FORMAT_MARKDOWN = 4


class Section(Base, TimestampMixin):
    """A section of a course. `id` is stable, `section` is the position."""

    __tablename__ = "course_sections"
    __table_args__ = (UniqueConstraint("course_id", "section", name="uq_course_section_position"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    section: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    summary_format: Mapped[int] = mapped_column(Integer, nullable=False, default=FORMAT_HTML)
    visible: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    availability: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Comma-separated content module ids
    sequence: Mapped[str] = mapped_column(Text, nullable=False, default="")

    course: Mapped["Course"] = relationship("Course", back_populates="sections")
    format_options: Mapped[list["SectionFormatOption"]] = relationship(
        "SectionFormatOption", back_populates="section", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Section(id={self.id!r}, course_id={self.course_id!r}, section={self.section!r})>"
