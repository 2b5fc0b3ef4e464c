from fastapi import APIRouter

from app.utils.response import success_response

router = APIRouter(prefix="/sample", tags=["sample"])

SAMPLE_DESCRIPTION = (
    "Large pothole in the middle of the road near City Hospital. It's been here for 2 weeks "
    "and is getting worse. Several cars have been damaged."
)


@router.get("")
async def get_sample():
    return success_response(data={"text": SAMPLE_DESCRIPTION})
