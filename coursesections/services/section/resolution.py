"""Resolve which sections of a course a request targets."""

from typing import Optional

from coursesections.models.section import Section
from coursesections.services.section.records import IDENTIFY_BY_ID


def resolve_target_positions(
    sections: list[Section],
    positions: list[int] | None = None,
    section_ids: list[int] | None = None,
    include_general: bool = True,
) -> list[int]:
    """
    Positions targeted by a list of positions and a list of section ids.

    With both lists empty every section is targeted, starting at 0 or at 1
    depending on `include_general`. Otherwise positions outside the course and
    ids of other courses are dropped. The general section can be targeted by id.

    Args:
        sections: All sections of the course
        positions: Requested positions
        section_ids: Requested section ids
        include_general: Whether the default target set starts at position 0

    Returns:
        Sorted, de-duplicated positions
    """
    positions = positions or []
    section_ids = section_ids or []
    last = max((s.section for s in sections), default=0)

    if not positions and not section_ids:
        start = 0 if include_general else 1
        return sorted(s.section for s in sections if s.section >= start)

    targets = {p for p in positions if 0 <= p <= last}
    position_by_id = {s.id: s.section for s in sections}
    targets.update(position_by_id[i] for i in section_ids if i in position_by_id)
    return sorted(targets)


def find_section(sections: list[Section], identify_by: str, value: int) -> Optional[Section]:
    """First section whose id (identify_by == "id") or position matches `value`."""
    for section in sections:
        key = section.id if identify_by == IDENTIFY_BY_ID else section.section
        if key == value:
            return section
    return None
