from app.schemas.analysis import AnalysisResult, GeoLocation, MediaKind
from app.services.request_builder import (
    ANALYSIS_SCHEMA,
    NO_HISTORY,
    build_prompt,
    build_request,
    classify_mime,
    strip_data_url,
    summarize_history,
)


def _result(payload: dict, issue_type: str, score: int) -> AnalysisResult:
    return AnalysisResult.model_validate({**payload, "issueType": issue_type, "severityScore": score})


def test_summarize_empty_history():
    assert summarize_history([]) == NO_HISTORY
    assert NO_HISTORY == "No previous issues analyzed in this session."


def test_summarize_history_keeps_order(analysis_payload):
    history = [_result(analysis_payload, "pothole", 6), _result(analysis_payload, "garbage", 3)]
    assert summarize_history(history) == (
        "Issue 1: pothole (Severity: 6/10); Issue 2: garbage (Severity: 3/10)"
    )


def test_classify_mime_declared_types():
    assert classify_mime("data:video/webm;base64,AAAA", MediaKind.VIDEO) == "video/webm"
    assert classify_mime("data:audio/wav;base64,AAAA", MediaKind.AUDIO) == "audio/wav"
    assert classify_mime("data:audio/x-m4a;base64,AAAA", MediaKind.AUDIO) == "audio/x-m4a"
    assert classify_mime("data:image/png;base64,AAAA", MediaKind.IMAGE) == "image/png"


def test_classify_mime_fallbacks():
    assert classify_mime("AAAA", MediaKind.VIDEO) == "video/mp4"
    assert classify_mime("AAAA", MediaKind.AUDIO) == "audio/mp3"
    assert classify_mime("AAAA", MediaKind.IMAGE) == "image/jpeg"
    # Declared type from another family does not count
    assert classify_mime("data:audio/ogg;base64,AAAA", MediaKind.VIDEO) == "video/mp4"
    assert classify_mime("data:application/octet-stream;base64,AAAA", MediaKind.AUDIO) == "audio/mp3"


def test_strip_data_url():
    assert strip_data_url("data:image/png;base64,QUJD") == "QUJD"
    assert strip_data_url("QUJD") == "QUJD"


def test_build_prompt_without_context():
    prompt = build_prompt("", [])
    assert "Location not provided." in prompt
    assert "User Description: No description provided." in prompt
    assert f"Session History: {NO_HISTORY}" in prompt
    assert "COMPLAINT LETTER" in prompt


def test_build_prompt_with_location_and_history(analysis_payload):
    history = [_result(analysis_payload, "pothole", 9)]
    prompt = build_prompt(
        "Drain overflowing", history, GeoLocation(latitude=17.6868, longitude=75.9091)
    )
    assert "Location coordinates: 17.6868, 75.9091" in prompt
    assert "User Description: Drain overflowing" in prompt
    assert "Issue 1: pothole (Severity: 9/10)" in prompt


def test_build_request_attachments_in_order():
    request = build_request(
        "data:image/png;base64,SU1H",
        "VklE",
        "data:audio/wav;base64,QVVE",
        "text",
        [],
    )
    assert [(a.kind, a.mime_type, a.data) for a in request.attachments] == [
        (MediaKind.IMAGE, "image/png", "SU1H"),
        (MediaKind.VIDEO, "video/mp4", "VklE"),
        (MediaKind.AUDIO, "audio/wav", "QVVE"),
    ]
    assert request.response_schema is ANALYSIS_SCHEMA


def test_build_request_text_only():
    request = build_request(None, None, None, "Streetlight out on 5th avenue", [])
    assert request.attachments == ()
    assert "Streetlight out on 5th avenue" in request.prompt


def test_build_request_does_not_touch_history(analysis_payload):
    history = (_result(analysis_payload, "pothole", 6),)
    build_request(None, None, None, "again", history)
    assert len(history) == 1


def test_schema_requires_every_field():
    props = ANALYSIS_SCHEMA["properties"]
    assert set(ANALYSIS_SCHEMA["required"]) == set(props)
    assert len(props) == 13
    assert props["severity"]["enum"] == ["Low", "Medium", "High", "Critical"]
    assert props["severityScore"]["type"] == "integer"
