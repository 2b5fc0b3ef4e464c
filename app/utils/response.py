from typing import Any

# Every analysis failure collapses to this message so backend details never leak
ANALYSIS_UNAVAILABLE = "Analysis unavailable. Please try again."


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": data, "message": message}


def error_response(message: str, data: Any = None) -> dict:
    return {"status": "error", "data": data, "message": message}
