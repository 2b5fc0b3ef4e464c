from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from app.dependencies import get_session_store
from app.schemas.analysis import GeoLocation, MediaKind, SubmissionForm
from app.schemas.session import SessionCreated
from app.services.media import read_upload
from app.services.presenter import render_result
from app.services.session_store import SessionStore
from app.utils.exceptions import AppException, InputValidationError
from app.utils.response import success_response

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _parse_location(latitude: float | None, longitude: float | None) -> GeoLocation | None:
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise InputValidationError("Location needs both latitude and longitude.")
    try:
        return GeoLocation(latitude=latitude, longitude=longitude)
    except ValidationError:
        raise InputValidationError("Location coordinates are out of range.")


@router.post("", status_code=201)
async def create_session(store: SessionStore = Depends(get_session_store)):
    presenter = store.create()
    data = SessionCreated(id=presenter.session_id, status=presenter.status).model_dump(mode="json")
    return success_response(data=data)


@router.get("/{session_id}")
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    presenter = store.get(session_id)
    return success_response(data=presenter.snapshot().model_dump(mode="json"))


@router.post("/{session_id}/analyze")
async def analyze_issue(
    session_id: str,
    image: UploadFile | None = File(None),
    video: UploadFile | None = File(None),
    audio: UploadFile | None = File(None),
    text: str = Form(""),
    latitude: float | None = Form(None),
    longitude: float | None = Form(None),
    store: SessionStore = Depends(get_session_store),
):
    presenter = store.get(session_id)

    # Size ceiling and location checks run before any request is built
    form = SubmissionForm(
        image=await read_upload(image, MediaKind.IMAGE),
        video=await read_upload(video, MediaKind.VIDEO),
        audio=await read_upload(audio, MediaKind.AUDIO),
        text=text,
        location=_parse_location(latitude, longitude),
    )

    result = await presenter.submit(form)
    return success_response(data=render_result(result, presenter.history))


@router.post("/{session_id}/retry")
async def retry_analysis(session_id: str, store: SessionStore = Depends(get_session_store)):
    presenter = store.get(session_id)
    if presenter.form is None:
        raise AppException("Nothing submitted yet in this session", status_code=404)

    result = await presenter.submit(presenter.form)
    return success_response(data=render_result(result, presenter.history))


@router.get("/{session_id}/history")
async def get_history(session_id: str, store: SessionStore = Depends(get_session_store)):
    presenter = store.get(session_id)
    return success_response(data=presenter.rendered_history())


@router.get("/{session_id}/letter", response_class=PlainTextResponse)
async def get_complaint_letter(session_id: str, store: SessionStore = Depends(get_session_store)):
    presenter = store.get(session_id)
    if presenter.current is None:
        raise AppException("No analysis to copy yet", status_code=404)
    return presenter.current.complaint_letter
