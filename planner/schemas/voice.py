from typing import Optional

from pydantic import AnyHttpUrl

from .common import ApiModel


class TranscribeRequest(ApiModel):
    audio_url: AnyHttpUrl
    language: Optional[str] = None


class TranscribeResponse(ApiModel):
    text: str
    language: Optional[str] = None
    duration: Optional[float] = None
