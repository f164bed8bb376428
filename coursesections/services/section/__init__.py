"""Section manager components: records, validation, target resolution and reordering."""

from coursesections.services.section.records import SectionUpdate, UpdateResult
from coursesections.services.section.reordering import SectionReorderer
from coursesections.services.section.resolution import find_section, resolve_target_positions
from coursesections.services.section.validation import SectionValidator

__all__ = [
    "SectionUpdate",
    "UpdateResult",
    "SectionValidator",
    "SectionReorderer",
    "find_section",
    "resolve_target_positions",
]
