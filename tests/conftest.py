import pytest


@pytest.fixture(autouse=True, scope="session")
def setup_test_settings():
    # Disable API key auth and never talk to a real inference endpoint
    from app.config import settings
    settings.api_key = ""
    settings.openai_api_key = "test-key"


@pytest.fixture
def analysis_payload() -> dict:
    return {
        "issueType": "Pothole",
        "severity": "High",
        "severityScore": 7,
        "description": "Deep pothole across the inner lane.",
        "evidenceSummary": "Broken asphalt edges and standing water visible.",
        "deepAnalysis": "## Safety Impact\nTwo-wheelers at risk.",
        "citizenActions": "Avoid the lane and warn others.",
        "authorityActions": "Cold patch now, full resurfacing later.",
        "complaintLetter": "To the Commissioner,\nPlease repair the pothole near City Hospital.",
        "sessionInsights": "First issue reported in this session.",
        "recommendedAction": "Patch the pothole within 48 hours.",
        "department": "Public Works Department",
        "estimatedPriority": "High",
    }
