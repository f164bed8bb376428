"""Tests for target resolution, insertion positions and request validation."""

import pytest

pytestmark = pytest.mark.unit

from coursesections.exceptions import ValidationError
from coursesections.formats import SocialFormat, TopicsFormat, WeeksFormat, get_course_format
from coursesections.models.section import Section
from coursesections.services.section.records import FormatOption, ItemResult, SectionUpdate
from coursesections.services.section.reordering import insertion_base
from coursesections.services.section.resolution import find_section, resolve_target_positions
from coursesections.services.section.validation import SectionValidator


@pytest.fixture
def sections():
    """Sections 0-4 of a course with ids 100-104."""
    return [Section(id=100 + n, course_id=1, section=n) for n in range(5)]


class TestResolveTargetPositions:
    def test_no_filter_includes_general(self, sections):
        assert resolve_target_positions(sections) == [0, 1, 2, 3, 4]

    def test_no_filter_without_general(self, sections):
        assert resolve_target_positions(sections, include_general=False) == [1, 2, 3, 4]

    def test_union_of_numbers_and_ids(self, sections):
        assert resolve_target_positions(sections, [3, 1], [104, 101]) == [1, 3, 4]

    def test_unknown_values_are_dropped(self, sections):
        assert resolve_target_positions(sections, [-1, 5, 2], [999]) == [2]

    def test_only_unknown_values_target_nothing(self, sections):
        assert resolve_target_positions(sections, [77]) == []

    def test_general_section_by_id(self, sections):
        assert resolve_target_positions(sections, section_ids=[100], include_general=False) == [0]


class TestFindSection:
    def test_by_number(self, sections):
        assert find_section(sections, "num", 3).id == 103

    def test_by_id(self, sections):
        assert find_section(sections, "id", 102).section == 2

    def test_miss(self, sections):
        assert find_section(sections, "num", 9) is None
        assert find_section(sections, "id", 3) is None


@pytest.mark.parametrize(
    "position,last,expected",
    [(0, 4, 5), (7, 4, 5), (1, 4, 1), (4, 4, 4), (0, 0, 1)],
)
def test_insertion_base(position, last, expected):
    assert insertion_base(position, last) == expected


class TestValidator:
    def test_int_rejects_bool(self):
        with pytest.raises(ValidationError) as exc_info:
            SectionValidator.validate_int(True, "courseid")
        assert exc_info.value.field == "courseid"

    def test_position(self):
        SectionValidator.validate_position(0)
        with pytest.raises(ValidationError):
            SectionValidator.validate_position(-1)

    def test_count(self):
        SectionValidator.validate_count(1)
        with pytest.raises(ValidationError):
            SectionValidator.validate_count(0)

    def test_int_list(self):
        SectionValidator.validate_int_list([], "sectionids")
        with pytest.raises(ValidationError):
            SectionValidator.validate_int_list([1, "2"], "sectionids")

    @pytest.mark.parametrize(
        "item",
        [
            SectionUpdate(section=1, type="name"),
            SectionUpdate(section=1, name="x" * 256),
            SectionUpdate(section=1, summaryformat=3),
            SectionUpdate(section=1, highlight=2),
            SectionUpdate(section=1, sectionformatoptions=[FormatOption("", "v")]),
            SectionUpdate(section=1, sectionformatoptions=[FormatOption("o" * 101, "v")]),
            SectionUpdate(section=1, sectionformatoptions=[FormatOption("visible", "1")]),
        ],
    )
    def test_invalid_updates(self, item):
        with pytest.raises(ValidationError):
            SectionValidator.validate_update(item)

    def test_valid_update(self):
        SectionValidator.validate_update(
            SectionUpdate(
                section=2,
                type="id",
                name="Week one",
                summary="",
                summaryformat=4,
                visible=0,
                highlight=1,
                sectionformatoptions=[FormatOption("layout", None)],
            )
        )


class TestRecords:
    def test_payload_orders_fields_before_options(self):
        item = SectionUpdate(
            section=1,
            name="A",
            visible=1,
            highlight=1,
            sectionformatoptions=[FormatOption("layout", "grid")],
        )
        assert list(item.payload().items()) == [("name", "A"), ("visible", 1), ("layout", "grid")]

    def test_payload_skips_options_without_value(self):
        item = SectionUpdate(
            section=1,
            sectionformatoptions=[FormatOption("layout", None), FormatOption("columns", "2")],
        )
        assert item.payload() == {"columns": "2"}

    def test_warning_from_foreign_error(self):
        class StoreFailure(Exception):
            code = "storefailure"

        warning = ItemResult(sectionnumber=2, sectionid=12).failed(StoreFailure("disk full")).to_warning()
        assert warning.warningcode == "storefailure"
        assert warning.message == "disk full"

    def test_warning_from_plain_exception(self):
        warning = ItemResult(sectionnumber=2, sectionid=12).failed(KeyError("x")).to_warning()
        assert warning.warningcode == "KeyError"


class TestFormats:
    def test_registry(self):
        assert isinstance(get_course_format("weeks"), WeeksFormat)
        assert isinstance(get_course_format("social"), SocialFormat)

    def test_unknown_format_falls_back_to_topics(self):
        assert isinstance(get_course_format("grid"), TopicsFormat)

    def test_section_names(self):
        fmt = TopicsFormat(max_sections=10)
        assert fmt.get_max_sections() == 10
        assert fmt.get_section_name(Section(section=0)) == "General"
        assert fmt.get_section_name(Section(section=2)) == "Topic 2"
        assert fmt.get_section_name(Section(section=2, name="Custom")) == "Custom"

    def test_sectionless_formats(self):
        assert not SocialFormat().uses_sections()
        assert get_course_format("singleactivity").uses_sections() is False
