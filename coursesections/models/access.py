"""Models backing authentication and capability checks."""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from coursesections.models.base import Base, TimestampMixin


class ServiceToken(Base, TimestampMixin):
    """Maps a web service token to the user it acts as."""

    __tablename__ = "service_tokens"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<ServiceToken(user_id={self.user_id!r}, enabled={self.enabled!r})>"


class CapabilityGrant(Base):
    """Grants a capability to a user in one course, or site-wide when course_id is NULL."""

    __tablename__ = "capability_grants"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", "capability", name="uq_capability_grant"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    course_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=True, index=True
    )
    capability: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<CapabilityGrant(user_id={self.user_id!r}, course_id={self.course_id!r}, "
            f"capability={self.capability!r})>"
        )
