"""Voice transcription client and the voice.transcribe procedure."""

from types import SimpleNamespace

import httpx
import pytest

from planner.transcription import Transcriber, TranscriptionError


def _fake_openai(calls, text="hello world"):
    def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(text=text, language="english", duration=2.0)

    return SimpleNamespace(audio=SimpleNamespace(transcriptions=SimpleNamespace(create=create)))


def _http(content=b"RIFF....WAVE", content_type="audio/wav", status_code=200):
    def handler(request):
        return httpx.Response(status_code, content=content, headers={"content-type": content_type})

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_transcribe_downloads_and_uploads_audio():
    calls = []
    transcriber = Transcriber(api_key="sk-test", http_client=_http(), openai_client=_fake_openai(calls))

    result = transcriber.transcribe("https://files.example.com/note.wav", language="en")

    assert result.text == "hello world"
    assert result.duration == 2.0
    assert calls[0]["language"] == "en"
    assert calls[0]["model"] == transcriber.model
    filename, data, content_type = calls[0]["file"]
    assert filename == "audio.wav"
    assert data == b"RIFF....WAVE"
    assert content_type == "audio/wav"


def test_language_is_omitted_when_not_given():
    calls = []
    transcriber = Transcriber(api_key="sk-test", http_client=_http(), openai_client=_fake_openai(calls))

    transcriber.transcribe("https://files.example.com/note.wav")

    assert "language" not in calls[0]


def test_extension_falls_back_to_url_suffix():
    calls = []
    transcriber = Transcriber(
        api_key="sk-test",
        http_client=_http(content_type="application/octet-stream"),
        openai_client=_fake_openai(calls),
    )

    transcriber.transcribe("https://files.example.com/memo.mp3")

    assert calls[0]["file"][0] == "audio.mp3"


def test_unsupported_format():
    transcriber = Transcriber(
        api_key="sk-test",
        http_client=_http(content_type="text/html"),
        openai_client=_fake_openai([]),
    )

    with pytest.raises(TranscriptionError) as exc_info:
        transcriber.transcribe("https://files.example.com/page")
    assert exc_info.value.code == "INVALID_FORMAT"


def test_file_too_large():
    transcriber = Transcriber(
        api_key="sk-test",
        max_bytes=4,
        http_client=_http(content=b"0123456789"),
        openai_client=_fake_openai([]),
    )

    with pytest.raises(TranscriptionError) as exc_info:
        transcriber.transcribe("https://files.example.com/note.wav")
    assert exc_info.value.code == "FILE_TOO_LARGE"


def test_download_failure():
    transcriber = Transcriber(api_key="sk-test", http_client=_http(status_code=404), openai_client=_fake_openai([]))

    with pytest.raises(TranscriptionError) as exc_info:
        transcriber.transcribe("https://files.example.com/missing.wav")
    assert exc_info.value.code == "DOWNLOAD_FAILED"


def test_not_configured_without_api_key():
    transcriber = Transcriber(api_key="", http_client=_http())

    with pytest.raises(TranscriptionError) as exc_info:
        transcriber.transcribe("https://files.example.com/note.wav")
    assert exc_info.value.code == "NOT_CONFIGURED"


def test_transcribe_endpoint(client, headers, transcriber):
    response = client.post(
        "/api/voice/transcribe",
        json={"audioUrl": "https://files.example.com/note.webm", "language": "en"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json() == {"text": "buy milk tomorrow", "language": "en", "duration": 1.5}
    assert transcriber.calls == [("https://files.example.com/note.webm", "en")]


def test_transcribe_endpoint_validates_url(client, headers, transcriber):
    response = client.post("/api/voice/transcribe", json={"audioUrl": "not a url"}, headers=headers)

    assert response.status_code == 400
    assert transcriber.calls == []


def test_transcribe_endpoint_requires_session(client, transcriber):
    response = client.post("/api/voice/transcribe", json={"audioUrl": "https://files.example.com/a.wav"})

    assert response.status_code == 401
    assert transcriber.calls == []


def test_transcribe_endpoint_maps_errors(client, headers, transcriber):
    transcriber.error = TranscriptionError("FILE_TOO_LARGE", "Audio exceeds 16 bytes")

    response = client.post(
        "/api/voice/transcribe",
        json={"audioUrl": "https://files.example.com/big.wav"},
        headers=headers,
    )

    assert response.status_code == 413
    assert response.json()["detail"]["code"] == "FILE_TOO_LARGE"
