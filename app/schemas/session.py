from enum import Enum

from pydantic import BaseModel


class PresenterStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SHOWING_RESULT = "showing_result"


class SeverityBand(BaseModel):
    label: str
    color: str


class CategoryBadge(BaseModel):
    style: str
    color: str
    icon: str | None = None


class SessionStats(BaseModel):
    count: int
    unique_issues: list[str]
    max_severity: int


class SessionCreated(BaseModel):
    id: str
    status: PresenterStatus


class FormSummary(BaseModel):
    has_image: bool
    has_video: bool
    has_audio: bool
    text: str
    latitude: float | None = None
    longitude: float | None = None


class SessionSnapshot(BaseModel):
    id: str
    status: PresenterStatus
    error: str | None = None
    analysis: dict | None = None
    history_count: int
    stats: SessionStats | None = None
    form: FormSummary | None = None
