from fastapi import APIRouter, Depends, HTTPException, status

from ..models import User
from ..schemas.voice import TranscribeRequest, TranscribeResponse
from ..transcription import Transcriber, TranscriptionError, get_transcriber
from .auth import get_current_user

router = APIRouter()

_ERROR_STATUS = {
    "INVALID_FORMAT": status.HTTP_400_BAD_REQUEST,
    "FILE_TOO_LARGE": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    "DOWNLOAD_FAILED": status.HTTP_502_BAD_GATEWAY,
    "SERVICE_ERROR": status.HTTP_502_BAD_GATEWAY,
    "NOT_CONFIGURED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.post("/transcribe", response_model=TranscribeResponse)
def transcribe(
    request: TranscribeRequest,
    current_user: User = Depends(get_current_user),
    transcriber: Transcriber = Depends(get_transcriber),
):
    """Transcribe an audio file reachable at ``audioUrl``."""
    try:
        return transcriber.transcribe(str(request.audio_url), language=request.language)
    except TranscriptionError as e:
        raise HTTPException(
            status_code=_ERROR_STATUS.get(e.code, status.HTTP_502_BAD_GATEWAY),
            detail={"code": e.code, "message": e.message},
        )
