from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class AnalysisResult(BaseModel):
    """One structured answer from the inference endpoint.

    Wire names are camelCase (``issueType``, ``severityScore``...). The score is
    not range-checked: whatever integer the model returns is kept.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    issue_type: str
    severity: Severity
    severity_score: int
    description: str
    evidence_summary: str
    deep_analysis: str
    citizen_actions: str
    authority_actions: str
    complaint_letter: str
    session_insights: str
    recommended_action: str
    department: str
    estimated_priority: str


class GeoLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class MediaAttachment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: MediaKind
    mime_type: str
    data: str  # base64 body, no data-URL prefix


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    attachments: tuple[MediaAttachment, ...] = ()
    response_schema: dict


class SubmissionForm(BaseModel):
    """Last input submitted in a session; media are self-describing data URLs."""

    model_config = ConfigDict(frozen=True)

    image: str | None = None
    video: str | None = None
    audio: str | None = None
    text: str = ""
    location: GeoLocation | None = None

    def is_empty(self) -> bool:
        return not (self.image or self.video or self.audio or self.text.strip())
