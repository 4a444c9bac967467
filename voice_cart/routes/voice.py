"""
Voice Routes for Voice Cart
===========================

This module contains the endpoints behind the microphone button: turning a
recording into text, and turning text into a shopping-list change.

Endpoints:
----------
- POST /voice/transcribe: Transcribe base64 audio, return the text
- POST /voice/command: Interpret and apply a transcript
- POST /voice/audio: Transcribe, then interpret and apply

Transcription Errors:
---------------------
TranscriptionError subclasses map to HTTP status codes:
- InvalidAudioError -> 400
- TranscriptionConfigError -> 503
- TranscriptionTimeoutError -> 504
- anything else -> 502

Rate Limiting:
--------------
The audio endpoints call a paid external API and are rate limited with
slowapi (RATE_LIMIT_VOICE, per client IP). /voice/command is not.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..command_logic import interpret_and_apply
from ..config import RATE_LIMIT_ENABLED, get_rate_limit_voice
from ..schemas import (
    AudioCommandRequest,
    ShoppingListItemOut,
    TextCommandRequest,
    TranscribeRequest,
    TranscribeResponse,
    VoiceCommandResponse,
)
from ..services.shopping_list import ShoppingListStore
from ..transcription import (
    AssemblyAITranscriber,
    InvalidAudioError,
    TranscriptionConfigError,
    TranscriptionError,
    TranscriptionTimeoutError,
    get_transcriber,
)
from .shopping_list import get_store


logger = logging.getLogger(__name__)

# Router definition
voice_router = APIRouter(prefix="/voice", tags=["Voice"])

# In-memory storage; use Redis for multiple workers
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


# =============================================================================
# Helper Functions
# =============================================================================

def _transcription_http_error(error: TranscriptionError) -> HTTPException:
    if isinstance(error, InvalidAudioError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, TranscriptionConfigError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(error, TranscriptionTimeoutError):
        code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=str(error))


def _transcribe(transcriber: AssemblyAITranscriber, audio_base64: str, language: str) -> str:
    try:
        return transcriber.transcribe(audio_base64, language)
    except TranscriptionError as e:
        logger.warning("Transcription failed (%s): %s", type(e).__name__, e)
        raise _transcription_http_error(e) from e


def _run_command(text: str, language: str, store: ShoppingListStore) -> VoiceCommandResponse:
    command, outcome = interpret_and_apply(text, language, store)
    return VoiceCommandResponse(
        transcript=text,
        command=command,
        outcome=outcome,
        items=[ShoppingListItemOut.model_validate(item) for item in store.list_items()],
        suggestions=[s.to_dict() for s in store.suggestions()],
    )


# =============================================================================
# Endpoints
# =============================================================================

@voice_router.post("/transcribe", response_model=TranscribeResponse)
@limiter.limit(get_rate_limit_voice)
def transcribe_audio(
    request: Request,
    req: TranscribeRequest,
    transcriber: AssemblyAITranscriber = Depends(get_transcriber),
) -> TranscribeResponse:
    """Transcribe a base64 recording into text."""
    text = _transcribe(transcriber, req.audio_base64, req.language)
    return TranscribeResponse(text=text)


@voice_router.post("/command", response_model=VoiceCommandResponse)
def voice_command(
    req: TextCommandRequest,
    store: ShoppingListStore = Depends(get_store),
) -> VoiceCommandResponse:
    """
    Interpret a transcript and apply it to the shopping list.

    Misses ("No matching item to remove", "Item not found in inventory") are
    returned with outcome.success = False and a 200 status.
    """
    return _run_command(req.text, req.language, store)


@voice_router.post("/audio", response_model=VoiceCommandResponse)
@limiter.limit(get_rate_limit_voice)
def voice_audio(
    request: Request,
    req: AudioCommandRequest,
    store: ShoppingListStore = Depends(get_store),
    transcriber: AssemblyAITranscriber = Depends(get_transcriber),
) -> VoiceCommandResponse:
    """Transcribe a recording, then interpret and apply the transcript."""
    text = _transcribe(transcriber, req.audio_base64, req.language)
    return _run_command(text, req.language, store)
