"""Turn uploaded files into self-describing data-URL payloads."""
import base64
import logging

from fastapi import UploadFile

from app.config import settings
from app.schemas.analysis import MediaKind, SubmissionForm
from app.utils.exceptions import InputValidationError, MediaSizeError

logger = logging.getLogger(__name__)


def encode_data_url(content: bytes, content_type: str) -> str:
    b64 = base64.b64encode(content).decode("utf-8")
    return f"data:{content_type};base64,{b64}"


def check_video_size(size: int) -> None:
    if size > settings.max_video_size_bytes:
        logger.info("Rejected video of %d bytes (limit %d)", size, settings.max_video_size_bytes)
        raise MediaSizeError()


def validate_submission(form: SubmissionForm) -> None:
    if form.is_empty():
        raise InputValidationError()


async def read_upload(upload: UploadFile | None, kind: MediaKind) -> str | None:
    """Read one uploaded file as a data URL; a missing or empty file is None.

    Browsers that omit a content type get the generic octet-stream label, which
    the request builder replaces with the fallback type for ``kind``.
    """
    if upload is None or not upload.filename:
        return None

    # Reject an oversized video before buffering it when the size is already known
    if kind is MediaKind.VIDEO and upload.size is not None:
        check_video_size(upload.size)

    content = await upload.read()
    if not content:
        return None
    if kind is MediaKind.VIDEO:
        check_video_size(len(content))

    content_type = upload.content_type or "application/octet-stream"
    logger.info("Received %s upload %r (%s, %d bytes)", kind.value, upload.filename, content_type, len(content))
    return encode_data_url(content, content_type)
