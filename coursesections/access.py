"""Authentication and course-scoped capability checks."""

import logging
import secrets
from dataclasses import dataclass

from sqlalchemy.orm import Session

from coursesections.exceptions import ErrorCode, PermissionDeniedError
from coursesections.models.access import CapabilityGrant, ServiceToken
from coursesections.models.course import Course
from coursesections.storage.repositories import AccessRepository

logger = logging.getLogger(__name__)

CAP_VIEW = "moodle/course:view"
CAP_UPDATE = "moodle/course:update"
CAP_MOVE_SECTIONS = "moodle/course:movesections"
CAP_SET_CURRENT_SECTION = "moodle/course:setcurrentsection"
CAP_VIEW_HIDDEN_SECTIONS = "moodle/course:viewhiddensections"

CAPABILITIES = (
    CAP_VIEW,
    CAP_UPDATE,
    CAP_MOVE_SECTIONS,
    CAP_SET_CURRENT_SECTION,
    CAP_VIEW_HIDDEN_SECTIONS,
)


@dataclass(frozen=True)
class Principal:
    """The user a call acts on behalf of."""

    user_id: int


class AccessControl:
    """Resolves tokens to principals and checks capabilities in a course."""

    def __init__(self, session: Session):
        """
        Initialize access control with a database session.

        Args:
            session: SQLAlchemy database session
        """
        self.repo = AccessRepository(session)

    def authenticate(self, token: str | None) -> Principal:
        """
        Resolve a service token.

        Raises:
            PermissionDeniedError: If the token is missing, unknown or disabled
        """
        record = self.repo.get_token(token) if token else None
        if record is None or not record.enabled:
            raise PermissionDeniedError("Invalid token - token not found", code=ErrorCode.INVALID_TOKEN)
        return Principal(user_id=record.user_id)

    def has_capability(self, principal: Principal, capability: str, course: Course) -> bool:
        return self.repo.has_grant(principal.user_id, capability, course.id)

    def require_login(self, principal: Principal, course: Course) -> None:
        """
        Gate run before any capability check: the principal must be able to enter the course.

        Raises:
            PermissionDeniedError: If the principal cannot access the course
        """
        if not self.has_capability(principal, CAP_VIEW, course):
            raise PermissionDeniedError(
                "Course or activity not accessible. (Not enrolled)",
                code=ErrorCode.REQUIRE_LOGIN,
            )

    def require_capability(self, principal: Principal, capability: str, course: Course) -> None:
        """
        Raises:
            PermissionDeniedError: If the principal lacks the capability in the course
        """
        if not self.has_capability(principal, capability, course):
            logger.info(
                "User %s denied %s in course %s", principal.user_id, capability, course.id
            )
            raise PermissionDeniedError(
                f"Sorry, but you do not currently have permissions to do that ({capability}).",
                capability=capability,
            )

    # Provisioning

    def issue_token(self, user_id: int, token: str | None = None) -> str:
        """Create an enabled service token for a user and return it."""
        if token is None:
            token = secrets.token_hex(16)
        self.repo.create_token(ServiceToken(token=token, user_id=user_id, enabled=True))
        return token

    def grant(self, user_id: int, capability: str, course_id: int | None = None) -> None:
        """Grant a capability in a course, or site-wide when course_id is None."""
        self.repo.add_grant(CapabilityGrant(user_id=user_id, course_id=course_id, capability=capability))
