"""Request and result records exchanged with the section manager."""

from dataclasses import dataclass, field
from typing import Any, Optional

from coursesections.exceptions import SectionServiceError

IDENTIFY_BY_NUMBER = "num"
IDENTIFY_BY_ID = "id"


@dataclass
class FormatOption:
    name: str
    value: Optional[str]


@dataclass
class SectionUpdate:
    """
    Changes for one section.

    `section` is a position when `type` is "num" and a section id when it is "id".
    Fields left as None are not touched.
    """

    section: int
    type: str = IDENTIFY_BY_NUMBER
    name: Optional[str] = None
    summary: Optional[str] = None
    summaryformat: Optional[int] = None
    visible: Optional[int] = None
    highlight: Optional[int] = None
    sectionformatoptions: list[FormatOption] = field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        """Store update payload: direct fields first, then format options that carry a value."""
        data: dict[str, Any] = {}
        for key in ("name", "summary", "summaryformat", "visible"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        for option in self.sectionformatoptions:
            if option.value is not None:
                data[option.name] = option.value
        return data


@dataclass
class CreatedSection:
    sectionid: int
    sectionnumber: int


@dataclass
class DeletedSection:
    id: int
    number: int
    name: str
    deleted: bool


@dataclass
class SectionInfo:
    sectionnum: int
    id: int
    name: str
    summary: str
    summaryformat: int
    visible: int
    uservisible: bool
    availability: Optional[str]
    highlighted: bool
    sequence: str
    courseformat: str
    sectionformatoptions: list[FormatOption]


@dataclass
class SectionName:
    sectionnum: int
    id: int
    name: str


@dataclass
class SectionFormatOptions:
    sectionnum: int
    id: int
    sectionformatoptions: list[FormatOption]


@dataclass
class SectionWarning:
    sectionnumber: Optional[int]
    sectionid: Optional[int]
    warningcode: str
    message: str


@dataclass
class ItemResult:
    """Outcome of one item of a batch update."""

    sectionnumber: Optional[int]
    sectionid: Optional[int]
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def failed(self, error: Exception) -> "ItemResult":
        self.error = error
        return self

    def to_warning(self) -> SectionWarning:
        """Convert a failed result into a warning record."""
        error = self.error
        if isinstance(error, SectionServiceError):
            code = error.code.value
        else:
            # Collaborator errors keep their own code when they carry one
            code = str(getattr(error, "code", None) or type(error).__name__)
        return SectionWarning(
            sectionnumber=self.sectionnumber,
            sectionid=self.sectionid,
            warningcode=code,
            message=str(error),
        )


@dataclass
class UpdateResult:
    warnings: list[SectionWarning] = field(default_factory=list)
