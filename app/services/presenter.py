"""Presentation rules for analysis results and the per-session state holder."""
import logging
from collections.abc import Sequence

from app.schemas.analysis import AnalysisResult, SubmissionForm
from app.schemas.session import (
    CategoryBadge,
    FormSummary,
    PresenterStatus,
    SessionSnapshot,
    SessionStats,
    SeverityBand,
)
from app.services import ai_service
from app.services.media import validate_submission
from app.services.request_builder import build_request
from app.utils.exceptions import AnalysisFailure, SubmissionInProgressError
from app.utils.response import ANALYSIS_UNAVAILABLE

logger = logging.getLogger(__name__)

WARNING_ICON = "alert-triangle"

# First match wins: a "damaged water pipe" is a water issue, not infrastructure
CATEGORY_RULES: list[tuple[tuple[str, ...], CategoryBadge]] = [
    (("pothole",), CategoryBadge(style="pothole", color="orange")),
    (("garbage", "waste", "trash"), CategoryBadge(style="waste", color="stone")),
    (("water", "drain", "flood", "leak"), CategoryBadge(style="water", color="blue")),
    (("signal", "light"), CategoryBadge(style="signal", color="red")),
    (
        ("infrastructure", "building", "road", "bridge", "damaged"),
        CategoryBadge(style="infrastructure", color="slate"),
    ),
    (
        ("safe", "hazard", "danger", "accident", "security"),
        CategoryBadge(style="safety", color="amber", icon=WARNING_ICON),
    ),
]
DEFAULT_BADGE = CategoryBadge(style="default", color="purple")


def severity_band(score: int) -> SeverityBand:
    if score >= 9:
        return SeverityBand(label="Critical", color="red")
    if score >= 7:
        return SeverityBand(label="High", color="orange")
    if score >= 4:
        return SeverityBand(label="Moderate", color="yellow")
    return SeverityBand(label="Low", color="green")


def category_badge(category: str) -> CategoryBadge:
    cat = category.lower()
    for keywords, badge in CATEGORY_RULES:
        if any(k in cat for k in keywords):
            return badge
    return DEFAULT_BADGE


def score_bar_width(score: int) -> int:
    """Bar width in percent, never below 5 so a zero score stays visible."""
    return max(score * 10, 5)


def session_stats(
    history: Sequence[AnalysisResult], current: AnalysisResult | None = None
) -> SessionStats | None:
    entries = list(history) if history else ([current] if current else [])
    if not entries:
        return None

    unique_issues = list(dict.fromkeys(e.issue_type for e in entries))
    max_severity = max((e.severity_score for e in entries), default=0)
    return SessionStats(count=len(entries), unique_issues=unique_issues, max_severity=max_severity)


def render_result(result: AnalysisResult, history: Sequence[AnalysisResult] = ()) -> dict:
    stats = session_stats(history, result)
    return {
        **result.model_dump(mode="json", by_alias=True),
        "severityBand": severity_band(result.severity_score).model_dump(),
        "categoryBadge": category_badge(result.issue_type).model_dump(),
        "scoreBarWidth": f"{score_bar_width(result.severity_score)}%",
        "sessionStats": stats.model_dump() if stats else None,
    }


class SessionPresenter:
    """Holds one browser session: its history, the shown result and the last form.

    Only one analysis may be in flight; history is replaced, never mutated, and
    only after a successful response.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.status = PresenterStatus.IDLE
        self.history: tuple[AnalysisResult, ...] = ()
        self.current: AnalysisResult | None = None
        self.error: str | None = None
        self.form: SubmissionForm | None = None

    async def submit(self, form: SubmissionForm) -> AnalysisResult:
        if self.status is PresenterStatus.LOADING:
            raise SubmissionInProgressError()
        validate_submission(form)

        self.form = form
        self.status = PresenterStatus.LOADING
        self.error = None
        self.current = None
        history = self.history

        try:
            request = build_request(form.image, form.video, form.audio, form.text, history, form.location)
            result = await ai_service.analyze(request)
        except AnalysisFailure:
            self.error = ANALYSIS_UNAVAILABLE
            logger.warning("Analysis failed for session %s, history kept at %d", self.session_id, len(history))
            raise
        else:
            self.history = history + (result,)
            self.current = result
            self.status = PresenterStatus.SHOWING_RESULT
            logger.info("Session %s now holds %d analyses", self.session_id, len(self.history))
            return result
        finally:
            # Cancellation included, any exit without a result returns to idle
            if self.status is PresenterStatus.LOADING:
                self.status = PresenterStatus.IDLE

    def snapshot(self) -> SessionSnapshot:
        form_summary = None
        if self.form is not None:
            form_summary = FormSummary(
                has_image=bool(self.form.image),
                has_video=bool(self.form.video),
                has_audio=bool(self.form.audio),
                text=self.form.text,
                latitude=self.form.location.latitude if self.form.location else None,
                longitude=self.form.location.longitude if self.form.location else None,
            )
        return SessionSnapshot(
            id=self.session_id,
            status=self.status,
            error=self.error,
            analysis=render_result(self.current, self.history) if self.current else None,
            history_count=len(self.history),
            stats=session_stats(self.history, self.current),
            form=form_summary,
        )

    def rendered_history(self) -> list[dict]:
        return [render_result(entry, self.history) for entry in self.history]
