import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.utils.response import ANALYSIS_UNAVAILABLE, error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InputValidationError(AppException):
    """Submission carries nothing to analyze, or a malformed location."""

    def __init__(self, message: str = "Please provide an image, video, audio or text description."):
        super().__init__(message, status_code=400)


class MediaSizeError(AppException):
    def __init__(self, message: str = "Video is too large. Please upload a smaller clip (under 20MB)."):
        super().__init__(message, status_code=413)


class SubmissionInProgressError(AppException):
    def __init__(self, message: str = "An analysis is already running for this session."):
        super().__init__(message, status_code=409)


class AnalysisFailure(AppException):
    """The inference call failed (network, auth, quota, configuration).

    The user-facing message is always the generic one; ``detail`` keeps the
    real cause for the log.
    """

    def __init__(self, detail: str = ""):
        super().__init__(ANALYSIS_UNAVAILABLE, status_code=502)
        self.detail = detail


class AnalysisParseError(AnalysisFailure):
    """The inference endpoint answered, but not with a valid analysis."""


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
