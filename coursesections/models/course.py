"""Course model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursesections.models.base import Base, TimestampMixin


class Course(Base, TimestampMixin):
    """A course owning an ordered set of sections."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shortname: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    fullname: Mapped[str] = mapped_column(String(1333), nullable=False, default="")
    format: Mapped[str] = mapped_column(String(21), nullable=False, default="topics")
    # Position of the highlighted section, 0 when nothing is highlighted
    marker: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sections: Mapped[list["Section"]] = relationship(
        "Section",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Section.section",
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, shortname={self.shortname!r}, format={self.format!r})>"
