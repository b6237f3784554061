"""Voice transcription through the OpenAI audio API.

The audio is fetched from the caller-supplied URL first, checked against a
size cap and a list of accepted formats, then uploaded for transcription.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import httpx
from fastapi import Request
import openai
from openai import OpenAI

from . import config

logger = logging.getLogger(__name__)

# Content types accepted by the transcription endpoint, mapped to the
# file extension sent along with the upload.
AUDIO_FORMATS = {
    "audio/webm": "webm",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/ogg": "ogg",
    "audio/m4a": "m4a",
    "audio/x-m4a": "m4a",
    "audio/mp4": "m4a",
    "video/mp4": "mp4",
    "video/webm": "webm",
}


class TranscriptionError(Exception):
    """Transcription failed. ``code`` is one of NOT_CONFIGURED, INVALID_FORMAT,
    FILE_TOO_LARGE, DOWNLOAD_FAILED or SERVICE_ERROR."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass
class Transcription:
    text: str
    language: Optional[str] = None
    duration: Optional[float] = None


def _extension_for(url: str, content_type: str) -> str:
    if content_type in AUDIO_FORMATS:
        return AUDIO_FORMATS[content_type]
    path = urlparse(url).path
    suffix = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    if suffix in set(AUDIO_FORMATS.values()):
        return suffix
    raise TranscriptionError("INVALID_FORMAT", f"Unsupported audio format: {content_type or 'unknown'}")


class Transcriber:
    """Downloads audio and transcribes it.

    The OpenAI client is only built on first use, so the rest of the service
    runs without an API key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_bytes: Optional[int] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
        openai_client: Optional[OpenAI] = None,
    ):
        self.api_key = config.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or config.TRANSCRIPTION_MODEL
        self.max_bytes = max_bytes or config.MAX_AUDIO_BYTES
        self.timeout = timeout or config.AUDIO_DOWNLOAD_TIMEOUT
        self._http_client = http_client
        self._openai_client = openai_client

    def _client(self) -> OpenAI:
        if self._openai_client is None:
            if not self.api_key:
                raise TranscriptionError("NOT_CONFIGURED", "Voice transcription is not configured")
            self._openai_client = OpenAI(api_key=self.api_key)
        return self._openai_client

    def _download(self, audio_url: str):
        client = self._http_client or httpx.Client(timeout=self.timeout, follow_redirects=True)
        try:
            with client.stream("GET", audio_url) as response:
                response.raise_for_status()
                content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    raise TranscriptionError("FILE_TOO_LARGE", f"Audio exceeds {self.max_bytes} bytes")

                chunks = []
                size = 0
                for chunk in response.iter_bytes():
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise TranscriptionError("FILE_TOO_LARGE", f"Audio exceeds {self.max_bytes} bytes")
                    chunks.append(chunk)
        except httpx.TimeoutException:
            raise TranscriptionError("DOWNLOAD_FAILED", f"Audio download timed out after {self.timeout} seconds")
        except httpx.HTTPStatusError as e:
            raise TranscriptionError("DOWNLOAD_FAILED", f"Audio download failed: {e.response.status_code}")
        except httpx.HTTPError as e:
            raise TranscriptionError("DOWNLOAD_FAILED", f"Audio download failed: {e}")
        finally:
            if self._http_client is None:
                client.close()

        return b"".join(chunks), content_type

    def transcribe(self, audio_url: str, language: Optional[str] = None) -> Transcription:
        client = self._client()
        audio, content_type = self._download(audio_url)
        extension = _extension_for(audio_url, content_type)
        logger.info("Transcribing %d bytes of %s audio", len(audio), extension)

        kwargs = {}
        if language:
            kwargs["language"] = language
        try:
            result = client.audio.transcriptions.create(
                model=self.model,
                file=(f"audio.{extension}", audio, content_type or f"audio/{extension}"),
                response_format="verbose_json",
                **kwargs,
            )
        except openai.OpenAIError as e:
            logger.warning("Transcription service error: %s", e)
            raise TranscriptionError("SERVICE_ERROR", f"Transcription service error: {e}")

        return Transcription(
            text=result.text,
            language=getattr(result, "language", None) or language,
            duration=getattr(result, "duration", None),
        )


def get_transcriber(request: Request) -> Transcriber:
    """Dependency returning the transcriber built by ``create_app``."""
    return request.app.state.transcriber
