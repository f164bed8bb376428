"""Request models for MCP tools, validated at the transport boundary."""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coursesections.services.section.records import FormatOption, SectionUpdate


class CourseRequest(BaseModel):
    """Fields shared by every tool."""

    model_config = ConfigDict(extra="forbid")

    courseid: int = Field(description="id of course")
    token: Optional[str] = Field(
        default=None, description="Service token (optional when the transport authenticates)"
    )


class SectionFilterRequest(CourseRequest):
    sectionnumbers: list[int] = Field(
        default_factory=list,
        description="List of sectionnumbers (positions). Wrong numbers are ignored.",
    )
    sectionids: list[int] = Field(
        default_factory=list,
        description="List of section ids. Wrong ids are ignored.",
    )


class CreateSectionsRequest(CourseRequest):
    position: int = Field(ge=0, description="Insert sections at position; 0 means at the end.")
    number: int = Field(default=1, ge=1, description="Number of sections to create. Default is 1.")


class DeleteSectionsRequest(SectionFilterRequest):
    """If both lists are empty all sections except the general one are deleted."""


class GetSectionsRequest(SectionFilterRequest):
    """If both lists are empty all sections are returned."""


class MoveSectionRequest(CourseRequest):
    sectionnumber: int = Field(description="Number (position) of the section to move")
    position: int = Field(
        description="Move section to position. Positions past the last section move to the end."
    )


class FormatOptionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, description="section format option name")
    value: Optional[Union[str, int, float, bool]] = Field(
        default=None, description="section format option value"
    )

    @field_validator("value")
    @classmethod
    def stringify(cls, value):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return str(int(value))
        return str(value)

    def to_record(self) -> FormatOption:
        return FormatOption(name=self.name, value=self.value)


class SectionIdentity(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["num", "id"] = Field(
        default="num", description="num/id: identify section by sectionnumber or id"
    )
    section: int = Field(description="depending on type: sectionnumber or sectionid")


class SectionUpdateModel(SectionIdentity):
    name: Optional[str] = Field(default=None, max_length=255, description="new name of the section")
    summary: Optional[str] = Field(default=None, description="summary")
    summaryformat: Optional[Literal[0, 1, 2, 4]] = Field(
        default=None, description="summary format (0 moodle, 1 html, 2 plain, 4 markdown)"
    )
    visible: Optional[Literal[0, 1]] = Field(
        default=None, description="1: available to student, 0: not available"
    )
    highlight: Optional[Literal[0, 1]] = Field(
        default=None, description="1: highlight, 0: remove highlight"
    )
    sectionformatoptions: list[FormatOptionModel] = Field(
        default_factory=list, description="additional options for particular course format"
    )

    def to_record(self) -> SectionUpdate:
        return SectionUpdate(
            section=self.section,
            type=self.type,
            name=self.name,
            summary=self.summary,
            summaryformat=self.summaryformat,
            visible=self.visible,
            highlight=self.highlight,
            sectionformatoptions=[o.to_record() for o in self.sectionformatoptions],
        )


class SectionNameModel(SectionIdentity):
    name: str = Field(max_length=255, description="new name of the section")

    def to_record(self) -> SectionUpdate:
        return SectionUpdate(section=self.section, type=self.type, name=self.name)


class SectionOptionsModel(SectionIdentity):
    sectionformatoptions: list[FormatOptionModel] = Field(
        description="options for particular course format"
    )

    def to_record(self) -> SectionUpdate:
        return SectionUpdate(
            section=self.section,
            type=self.type,
            sectionformatoptions=[o.to_record() for o in self.sectionformatoptions],
        )


class UpdateSectionsRequest(CourseRequest):
    sections: list[SectionUpdateModel] = Field(default_factory=list, description="sections to update")


class UpdateSectionNamesRequest(CourseRequest):
    sections: list[SectionNameModel] = Field(default_factory=list, description="sections to rename")


class UpdateSectionFormatOptionsRequest(CourseRequest):
    sections: list[SectionOptionsModel] = Field(
        default_factory=list, description="sections whose format options to set"
    )
