"""
Speech-to-text via AssemblyAI.

This module turns a base64-encoded recording into transcript text:
1. Decodes the base64 payload
2. Uploads the raw bytes to /v2/upload
3. Creates a transcript job for the uploaded audio
4. Polls the job until it completes, fails or runs out of attempts

Any failure is raised as a TranscriptionError subclass so routes can map it
to an HTTP status; callers treat it as "no command to parse". Audio bytes and
the API key are never logged.
"""

import base64
import binascii
import logging
import time
from typing import Callable, Optional

import requests

from .config import (
    ASSEMBLYAI_API_KEY,
    ASSEMBLYAI_BASE_URL,
    TRANSCRIBE_LANGUAGE_CODES,
    TRANSCRIBE_MAX_ATTEMPTS,
    TRANSCRIBE_POLL_INTERVAL,
    TRANSCRIBE_REQUEST_TIMEOUT,
)
from .interpreter import resolve_language

logger = logging.getLogger(__name__)

SPEECH_MODEL = "universal"


# =============================================================================
# Errors
# =============================================================================

class TranscriptionError(Exception):
    """Base class for transcription failures."""


class InvalidAudioError(TranscriptionError):
    """The payload is not valid base64 or decodes to nothing."""


class TranscriptionConfigError(TranscriptionError):
    """No API key is configured."""


class TranscriptionServiceError(TranscriptionError):
    """AssemblyAI rejected a request or reported a failed transcript."""


class TranscriptionTimeoutError(TranscriptionError):
    """A request timed out or the job did not finish within the poll budget."""


class TranscriptionNetworkError(TranscriptionError):
    """AssemblyAI could not be reached."""


def decode_audio(audio_base64: str) -> bytes:
    """Decode a base64 recording, rejecting malformed or empty payloads."""
    if not audio_base64:
        raise InvalidAudioError("audio_base64 is required")
    # Browsers send data URLs ("data:audio/webm;base64,....")
    if audio_base64.startswith("data:") and "," in audio_base64:
        audio_base64 = audio_base64.split(",", 1)[1]
    try:
        audio = base64.b64decode(audio_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidAudioError("audio_base64 is not valid base64") from e
    if not audio:
        raise InvalidAudioError("audio_base64 decodes to an empty recording")
    return audio


# =============================================================================
# Client
# =============================================================================

class AssemblyAITranscriber:
    """
    Blocking AssemblyAI client.

    Args:
        api_key: AssemblyAI API key
        base_url: API base URL
        poll_interval: Seconds between status polls
        max_attempts: Status polls before giving up
        request_timeout: Per-request timeout in seconds
        http: requests.Session (injectable for tests)
        sleep: Sleep function used between polls (injectable for tests)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = ASSEMBLYAI_BASE_URL,
        poll_interval: float = TRANSCRIBE_POLL_INTERVAL,
        max_attempts: int = TRANSCRIBE_MAX_ATTEMPTS,
        request_timeout: float = TRANSCRIBE_REQUEST_TIMEOUT,
        http: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = ASSEMBLYAI_API_KEY if api_key is None else api_key
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.request_timeout = request_timeout
        self.http = http or requests.Session()
        self.sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def transcribe(self, audio_base64: str, language: str | None = "en") -> str:
        """
        Transcribe a base64 recording.

        Args:
            audio_base64: Base64 audio (a data URL prefix is accepted)
            language: Interpreter language tag ("en", "hi", "hi-IN", ...)

        Returns:
            Transcript text; may be empty when nothing was said

        Raises:
            TranscriptionError: One of its subclasses, on any failure
        """
        if not self.configured:
            raise TranscriptionConfigError("ASSEMBLYAI_API_KEY is not set")

        audio = decode_audio(audio_base64)
        language_code = TRANSCRIBE_LANGUAGE_CODES[resolve_language(language)]
        logger.info("Starting transcription (%d bytes, language_code=%s)", len(audio), language_code)

        upload = self._request("POST", "/v2/upload", data=audio)
        audio_url = upload.get("upload_url")
        if not audio_url:
            raise TranscriptionServiceError("Upload response did not include upload_url")

        job = self._request(
            "POST",
            "/v2/transcript",
            json={
                "audio_url": audio_url,
                "speech_model": SPEECH_MODEL,
                "language_code": language_code,
            },
        )
        transcript_id = job.get("id")
        if not transcript_id:
            raise TranscriptionServiceError("Transcript response did not include an id")

        return self._poll(transcript_id)

    def _poll(self, transcript_id: str) -> str:
        for attempt in range(1, self.max_attempts + 1):
            result = self._request("GET", f"/v2/transcript/{transcript_id}")
            status = result.get("status")

            if status == "completed":
                text = result.get("text") or ""
                logger.info("Transcript %s completed after %d poll(s)", transcript_id, attempt)
                return text

            if status == "error":
                logger.error("Transcript %s failed: %s", transcript_id, result.get("error"))
                raise TranscriptionServiceError(f"Transcription failed: {result.get('error')}")

            logger.debug("Transcript %s status=%s, waiting", transcript_id, status)
            self.sleep(self.poll_interval)

        logger.error("Transcript %s did not complete after %d polls", transcript_id, self.max_attempts)
        raise TranscriptionTimeoutError("Transcription timeout - took too long to complete")

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        headers = {"authorization": self.api_key}
        try:
            response = self.http.request(
                method,
                url,
                headers=headers,
                timeout=self.request_timeout,
                **kwargs,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            logger.error("AssemblyAI %s %s timed out", method, path)
            raise TranscriptionTimeoutError(f"Request to {path} timed out") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            logger.error("AssemblyAI %s %s returned HTTP %s", method, path, status)
            raise TranscriptionServiceError(f"AssemblyAI returned HTTP {status} for {path}") from e
        except ValueError as e:
            # Undecodable response bodies raise a ValueError subclass
            raise TranscriptionServiceError(f"Invalid JSON from {path}") from e
        except requests.exceptions.RequestException as e:
            logger.error("AssemblyAI %s %s failed: %s", method, path, e)
            raise TranscriptionNetworkError(f"Could not reach AssemblyAI: {e}") from e


_default_transcriber: Optional[AssemblyAITranscriber] = None


def get_transcriber() -> AssemblyAITranscriber:
    """FastAPI dependency returning the process-wide transcriber."""
    global _default_transcriber
    if _default_transcriber is None:
        _default_transcriber = AssemblyAITranscriber()
    return _default_transcriber
