import logging
import re

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from app.config import settings
from app.schemas.analysis import AnalysisRequest, AnalysisResult, MediaAttachment, MediaKind
from app.utils.exceptions import AnalysisFailure, AnalysisParseError

logger = logging.getLogger(__name__)

SCHEMA_NAME = "civic_issue_analysis"

# input_audio only names a container format, not a full MIME type
_AUDIO_FORMATS = {"mpeg": "mp3", "mpeg3": "mp3", "x-mp3": "mp3", "x-wav": "wav", "wave": "wav", "x-m4a": "m4a"}


def _mask_secrets(message: str) -> str:
    message = re.sub(r"sk-[A-Za-z0-9_-]+", "sk-***", message)
    return re.sub(r"AIza[A-Za-z0-9_-]+", "AIza***", message)


def _audio_format(mime_type: str) -> str:
    subtype = mime_type.split("/", 1)[-1].lower()
    return _AUDIO_FORMATS.get(subtype, subtype)


def _content_part(attachment: MediaAttachment) -> dict:
    if attachment.kind is MediaKind.AUDIO:
        return {
            "type": "input_audio",
            "input_audio": {"data": attachment.data, "format": _audio_format(attachment.mime_type)},
        }
    # Images and video clips both travel as inline data URLs
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{attachment.mime_type};base64,{attachment.data}"},
    }


def _build_api_kwargs(model: str, request: AnalysisRequest) -> dict:
    content: list[dict] = [{"type": "text", "text": request.prompt}]
    content.extend(_content_part(a) for a in request.attachments)
    return {
        "model": model,
        "messages": [{"role": "user", "content": content}],
        "response_format": {
            "type": "json_schema",
            "json_schema": {"name": SCHEMA_NAME, "schema": request.response_schema, "strict": True},
        },
    }


def parse_analysis(raw_text: str) -> AnalysisResult:
    """Strictly parse the model's JSON answer.

    A surrounding markdown code fence is tolerated; anything else that is not a
    complete, well-typed analysis object raises AnalysisParseError.
    """
    json_text = raw_text.strip()
    if json_text.startswith("```"):
        lines = json_text.split("\n")
        lines = [l for l in lines if not l.strip().startswith("```")]
        json_text = "\n".join(lines)

    if not json_text:
        raise AnalysisParseError("empty response")

    try:
        return AnalysisResult.model_validate_json(json_text, strict=True)
    except ValidationError as e:
        raise AnalysisParseError(str(e)) from e


async def _call_openai(request: AnalysisRequest) -> str:
    """Send one request to the inference endpoint and return the raw text."""
    model = settings.openai_model
    logger.info("Calling model=%s with %d attachments", model, len(request.attachments))

    kwargs = {"api_key": settings.openai_api_key}
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    async with AsyncOpenAI(**kwargs) as client:
        response = await client.chat.completions.create(**_build_api_kwargs(model, request))

    if not response.choices:
        # Compatible endpoints answer a blocked prompt with no candidates at all
        logger.error("Model returned no choices for model=%s", model)
        raise AnalysisParseError("response has no choices")
    raw_text = response.choices[0].message.content or ""
    logger.info("Model raw response (%d chars): %s", len(raw_text), raw_text[:500])
    return raw_text


async def analyze(request: AnalysisRequest) -> AnalysisResult:
    """Run one analysis. Single attempt: no retry, no backoff."""
    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY not configured, cannot analyze")
        raise AnalysisFailure("OPENAI_API_KEY not configured")

    try:
        raw_text = await _call_openai(request)
    except OpenAIError as e:
        detail = _mask_secrets(str(e))
        logger.exception("Inference call FAILED: %s", detail)
        raise AnalysisFailure(detail) from e

    try:
        result = parse_analysis(raw_text)
    except AnalysisParseError as e:
        logger.error("Failed to parse model response: %s", e.detail)
        raise

    logger.info("Analysis completed: issue=%s score=%d", result.issue_type, result.severity_score)
    return result
