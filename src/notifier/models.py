"""Pydantic models for assignment data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Models are frozen: a load produces new values and never mutates earlier ones.
"""

from enum import Enum

from pydantic import BaseModel, computed_field


class Role(str, Enum):
    """Whether an assignment names one participant or a participant plus assistant."""

    SINGLE = "single"
    PAIRED = "paired"


class AssignmentFragment(BaseModel):
    """Decoded content of one schedule cell, e.g. ``"4 Alice / Bob"``."""

    model_config = {"frozen": True}

    slot_number: int  # Leading integer of the cell
    participant: str  # First (or only) name
    co_participant: str | None = None  # Second name after "/", if any

    @computed_field  # type: ignore[prop-decorator]
    @property
    def role(self) -> Role:
        return Role.PAIRED if self.co_participant else Role.SINGLE


class AssignmentRecord(BaseModel):
    """One assignment for one week, ready to be rendered.

    ``source_date`` is the column header exactly as it appears in the sheet
    (e.g. "JANUARY 5-11"), ``localized_date`` its transliteration ("1月5-11日").
    """

    model_config = {"frozen": True}

    source_date: str
    localized_date: str
    slot_number: int
    participant: str
    co_participant: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def role(self) -> Role:
        return Role.PAIRED if self.co_participant else Role.SINGLE


class MessageTemplates(BaseModel):
    """Text templates for notification messages.

    Placeholders: ``{participant}``, ``{co_participant}``, ``{marker}``,
    ``{localized_date}``, ``{slot_number}``.
    """

    model_config = {"frozen": True}

    single: str
    paired: str
    title_single: str
    title_paired: str
    male_marker: str
    female_marker: str


class RenderedMessage(BaseModel):
    """A rendered notification plus the short title shown in list views."""

    model_config = {"frozen": True}

    title: str
    text: str
    record: AssignmentRecord


class SourceKind(str, Enum):
    """How the sheet URL is turned into a CSV download."""

    EXPORT = "export"  # docs.google.com/spreadsheets/d/<id>/edit#gid=<gid>
    PUBLISHED = "published"  # File > Share > Publish to web, CSV output
    PROXY = "proxy"  # Apps Script / cloud function returning CSV text


class SheetSource(BaseModel):
    """A sheet URL resolved to the URL that actually returns CSV text."""

    model_config = {"frozen": True}

    kind: SourceKind
    url: str  # As entered by the user
    csv_url: str  # Where the CSV body is fetched from
    sheet_id: str | None = None  # Only known for EXPORT sources
    gid: str | None = None


NO_ASSIGNMENTS_MESSAGE = "No assignments found. Please check your sheet format."


class LoadResult(BaseModel):
    """Everything one load produces. The next load replaces it wholesale."""

    model_config = {"frozen": True}

    records: list[AssignmentRecord]
    messages: list[RenderedMessage]

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def status_message(self) -> str:
        if self.is_empty:
            return NO_ASSIGNMENTS_MESSAGE
        return f"{len(self.records)} assignments loaded."
