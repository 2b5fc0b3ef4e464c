from app.utils.response import ANALYSIS_UNAVAILABLE, success_response, error_response


def test_success_response_with_data():
    result = success_response(data={"key": "value"})
    assert result == {"status": "success", "data": {"key": "value"}, "message": None}


def test_success_response_with_message():
    result = success_response(data=None, message="Session created")
    assert result == {"status": "success", "data": None, "message": "Session created"}


def test_error_response():
    result = error_response(ANALYSIS_UNAVAILABLE)
    assert result == {"status": "error", "data": None, "message": "Analysis unavailable. Please try again."}


def test_error_response_with_data():
    result = error_response("Invalid input", data={"field": "video"})
    assert result == {"status": "error", "data": {"field": "video"}, "message": "Invalid input"}
