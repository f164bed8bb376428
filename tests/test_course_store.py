"""Tests for course store renumbering, marker tracking and format options."""

import pytest

pytestmark = pytest.mark.unit

from coursesections.formats import get_course_format


def positions(store, course):
    return [s.section for s in store.get_sections(course)]


def ids_in_order(store, course):
    return [s.id for s in store.get_sections(course)]


class TestCreateCourse:
    def test_create_course_sections(self, store):
        course = store.create_course("C1", num_sections=3)
        assert positions(store, course) == [0, 1, 2, 3]
        assert store.get_last_section_number(course) == 3
        assert course.fullname == "C1"

    def test_course_without_numbered_sections(self, store):
        course = store.create_course("C1")
        assert positions(store, course) == [0]
        assert store.get_last_section_number(course) == 0


class TestCreateSection:
    def test_append(self, store, course):
        section = store.create_section(course, 0)
        assert section.section == 6
        assert positions(store, course) == list(range(7))

    def test_position_past_end_appends(self, store, course):
        section = store.create_section(course, 40)
        assert section.section == 6

    def test_insert_shifts_following_sections(self, store, course):
        before = ids_in_order(store, course)
        section = store.create_section(course, 2)

        after = ids_in_order(store, course)
        assert section.section == 2
        assert after == before[:2] + [section.id] + before[2:]
        assert positions(store, course) == list(range(7))

    def test_insert_shifts_marker(self, store, course):
        store.set_marker(course, 3)
        store.create_section(course, 2)
        assert course.marker == 4

    def test_insert_after_marker_keeps_it(self, store, course):
        store.set_marker(course, 1)
        store.create_section(course, 2)
        assert course.marker == 1


class TestDeleteSection:
    def test_delete_closes_gap(self, store, course):
        before = ids_in_order(store, course)
        assert store.delete_section(store.get_section_by_position(course, 2)) is True

        assert ids_in_order(store, course) == before[:2] + before[3:]
        assert positions(store, course) == [0, 1, 2, 3, 4]

    def test_general_section_is_kept(self, store, course):
        assert store.delete_section(store.get_section_by_position(course, 0)) is False
        assert positions(store, course) == list(range(6))

    def test_deleting_highlighted_section_clears_marker(self, store, course):
        store.set_marker(course, 2)
        store.delete_section(store.get_section_by_position(course, 2))
        assert course.marker == 0

    def test_deleting_earlier_section_moves_marker(self, store, course):
        store.set_marker(course, 4)
        store.delete_section(store.get_section_by_position(course, 2))
        assert course.marker == 3


class TestMoveSection:
    def test_move_down(self, store, course):
        before = ids_in_order(store, course)
        assert store.move_section_to(course, 2, 5) is True

        after = ids_in_order(store, course)
        assert after == [before[0], before[1], before[3], before[4], before[5], before[2]]
        assert positions(store, course) == list(range(6))

    def test_move_up(self, store, course):
        before = ids_in_order(store, course)
        assert store.move_section_to(course, 4, 1) is True

        after = ids_in_order(store, course)
        assert after == [before[0], before[4], before[1], before[2], before[3], before[5]]

    def test_move_and_back_restores_order(self, store, course):
        before = ids_in_order(store, course)
        store.move_section_to(course, 2, 5)
        store.move_section_to(course, 5, 2)
        assert ids_in_order(store, course) == before

    def test_destination_past_end_moves_to_end(self, store, course):
        moved = store.get_section_by_position(course, 1).id
        assert store.move_section_to(course, 1, 99) is True
        assert ids_in_order(store, course)[-1] == moved

    def test_same_position_is_noop(self, store, course):
        before = ids_in_order(store, course)
        assert store.move_section_to(course, 3, 3) is True
        assert ids_in_order(store, course) == before

    @pytest.mark.parametrize("position,destination", [(0, 2), (2, 0), (9, 1)])
    def test_impossible_moves(self, store, course, position, destination):
        before = ids_in_order(store, course)
        assert store.move_section_to(course, position, destination) is False
        assert ids_in_order(store, course) == before

    def test_marker_follows_moved_section(self, store, course):
        store.set_marker(course, 2)
        store.move_section_to(course, 2, 5)
        assert course.marker == 5

    def test_marker_follows_shifted_section(self, store, course):
        store.set_marker(course, 3)
        store.move_section_to(course, 1, 4)
        assert course.marker == 2

        store.move_section_to(course, 5, 1)
        assert course.marker == 3


class TestUpdateSection:
    def test_direct_fields_and_options(self, store, course):
        section = store.get_section_by_position(course, 1)
        store.update_section(
            section,
            {"name": "Intro", "summaryformat": 4, "visible": 0, "layout": "grid", "collapsed": 1},
        )

        assert section.name == "Intro"
        assert section.summary_format == 4
        assert section.visible == 0
        options = store.get_format_options(section, get_course_format("topics"))
        assert options == {"collapsed": "1", "layout": "grid"}

    def test_option_overwrite(self, store, course):
        section = store.get_section_by_position(course, 1)
        store.update_section(section, {"layout": "grid"})
        store.update_section(section, {"layout": "list"})

        options = store.get_format_options(section, get_course_format("topics"))
        assert options == {"layout": "list"}

    def test_options_are_kept_per_format(self, store, course):
        section = store.get_section_by_position(course, 1)
        store.update_section(section, {"layout": "grid"})

        assert store.get_format_options(section, get_course_format("weeks")) == {}

    def test_savepoint_rolls_back_block(self, store, course):
        section = store.get_section_by_position(course, 1)
        with pytest.raises(RuntimeError):
            with store.savepoint():
                store.update_section(section, {"name": "Lost"})
                raise RuntimeError("boom")

        store.session.refresh(section)
        assert section.name is None
