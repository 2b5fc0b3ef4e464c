"""Assemble the inference request for one civic issue submission."""
import logging
import os
import re
from collections.abc import Sequence

from app.schemas.analysis import (
    AnalysisRequest,
    AnalysisResult,
    GeoLocation,
    MediaAttachment,
    MediaKind,
)

logger = logging.getLogger(__name__)

PROMPT_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "prompts",
    "civic_analysis.txt",
)

NO_HISTORY = "No previous issues analyzed in this session."
NO_LOCATION = "Location not provided."
NO_DESCRIPTION = "No description provided."

FALLBACK_MIME_TYPES: dict[MediaKind, str] = {
    MediaKind.IMAGE: "image/jpeg",
    MediaKind.VIDEO: "video/mp4",
    MediaKind.AUDIO: "audio/mp3",
}

_DATA_URL_RE = re.compile(r"^data:(?P<type>(?P<kind>[a-z]+)/[\w.+-]+);base64,", re.IGNORECASE)

_STRING = {"type": "string"}

ANALYSIS_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "issueType": {**_STRING, "description": "The Issue Category identified in Detection"},
        "severity": {
            "type": "string",
            "enum": ["Low", "Medium", "High", "Critical"],
            "description": "The Risk Level identified in Deep Analysis",
        },
        "severityScore": {"type": "integer", "description": "The Severity (1-10) identified in Detection"},
        "description": {**_STRING, "description": "Professional technical description"},
        "evidenceSummary": {**_STRING, "description": "Evidence observed in Detection"},
        "deepAnalysis": {
            **_STRING,
            "description": "Full text of the Deep Analysis section (Safety, Env, Pop, Root Cause) in Markdown",
        },
        "citizenActions": {**_STRING, "description": "Citizen Actions from Recommendations"},
        "authorityActions": {**_STRING, "description": "Authority Actions from Recommendations"},
        "complaintLetter": {**_STRING, "description": "The Generated Complaint Letter"},
        "sessionInsights": {**_STRING, "description": "Session Insights comparing with history"},
        "recommendedAction": {**_STRING, "description": "Short summary of authority action"},
        "department": {**_STRING, "description": "Responsible City Department"},
        "estimatedPriority": {**_STRING, "description": "Priority Estimation"},
    },
    "required": [
        "issueType", "severity", "severityScore", "description", "evidenceSummary",
        "deepAnalysis", "citizenActions", "authorityActions", "complaintLetter",
        "sessionInsights", "recommendedAction", "department", "estimatedPriority",
    ],
}


def _load_prompt() -> str:
    with open(PROMPT_PATH) as f:
        return f.read()


def summarize_history(history: Sequence[AnalysisResult]) -> str:
    if not history:
        return NO_HISTORY
    return "; ".join(
        f"Issue {i}: {h.issue_type} (Severity: {h.severity_score}/10)"
        for i, h in enumerate(history, start=1)
    )


def classify_mime(payload: str, kind: MediaKind) -> str:
    """Return the MIME type declared by a data URL, or the fallback for ``kind``.

    A declared type only counts when it belongs to the same family, so an
    ``audio/*`` prefix on a video payload still yields ``video/mp4``.
    """
    match = _DATA_URL_RE.match(payload)
    if match and match.group("kind").lower() == kind.value:
        return match.group("type")
    return FALLBACK_MIME_TYPES[kind]


def strip_data_url(payload: str) -> str:
    _, sep, body = payload.partition(",")
    return body if sep and body else payload


def build_prompt(text: str, history: Sequence[AnalysisResult], location: GeoLocation | None = None) -> str:
    if location is not None:
        location_line = f"Location coordinates: {location.latitude}, {location.longitude}"
    else:
        location_line = NO_LOCATION
    return _load_prompt().format(
        location=location_line,
        description=text.strip() or NO_DESCRIPTION,
        history=summarize_history(history),
    )


def build_request(
    image: str | None,
    video: str | None,
    audio: str | None,
    text: str,
    history: Sequence[AnalysisResult],
    location: GeoLocation | None = None,
) -> AnalysisRequest:
    attachments = []
    for kind, payload in ((MediaKind.IMAGE, image), (MediaKind.VIDEO, video), (MediaKind.AUDIO, audio)):
        if not payload:
            continue
        attachments.append(MediaAttachment(
            kind=kind,
            mime_type=classify_mime(payload, kind),
            data=strip_data_url(payload),
        ))

    logger.info(
        "Built analysis request: attachments=%s, history=%d, location=%s",
        [a.mime_type for a in attachments], len(history), location is not None,
    )
    return AnalysisRequest(
        prompt=build_prompt(text, history, location),
        attachments=tuple(attachments),
        response_schema=ANALYSIS_SCHEMA,
    )
