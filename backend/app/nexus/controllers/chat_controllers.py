"""Chat endpoints consumed by the browser client.

Create sessions, switch agent modes, send turns and fetch the audio of
synthesized replies.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from nexus.configs import get_settings
from nexus.logger_config import get_logger
from nexus.models.chat_models import (
    ChangeModeRequest,
    CreateSessionRequest,
    SendMessageRequest,
    SessionResponse,
    TurnResponse,
)
from nexus.models.message_models import MessageType
from nexus.services.chat_sessions import (
    ChatSession,
    ChatSessionService,
    SessionNotFoundError,
    TurnInProgressError,
    get_chat_session_service,
)
from nexus.services.chatbot import ChatBot, get_chatbot
from nexus.services.process_audio import AudioFormatError, ProcessAudio

logger = get_logger(__name__)

chat_router = APIRouter(prefix="/chat", tags=["Chat"])


def get_process_audio() -> ProcessAudio:
    """FastAPI dependency building the WAV converter from settings."""
    return ProcessAudio(default_sample_rate=get_settings().AUDIO_SAMPLE_RATE)


def _session_response(session: ChatSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.id,
        mode=session.mode,
        messages=list(session.memory.snapshot()),
    )


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Chat session {session_id} not found.",
    )


@chat_router.post(
    "/sessions",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionResponse,
    response_model_exclude_none=True,
)
def create_session(
    data: CreateSessionRequest,
    session_service: ChatSessionService = Depends(get_chat_session_service),
) -> SessionResponse:
    """Open a session seeded with the welcome message."""
    return _session_response(session_service.create(data.mode))


@chat_router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    response_model_exclude_none=True,
)
def get_session(
    session_id: str,
    session_service: ChatSessionService = Depends(get_chat_session_service),
) -> SessionResponse:
    """Return the mode and history of a session."""
    try:
        return _session_response(session_service.get(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)


@chat_router.put(
    "/sessions/{session_id}/mode",
    response_model=SessionResponse,
    response_model_exclude_none=True,
)
def change_mode(
    session_id: str,
    data: ChangeModeRequest,
    chatbot: ChatBot = Depends(get_chatbot),
) -> SessionResponse:
    """Switch the agent mode; the switch shows up as a system message."""
    try:
        session, _ = chatbot.change_mode(session_id, data.mode)
    except SessionNotFoundError:
        raise _not_found(session_id)
    return _session_response(session)


@chat_router.post(
    "/sessions/{session_id}/messages",
    response_model=TurnResponse,
    response_model_exclude_none=True,
)
def send_message(
    session_id: str,
    data: SendMessageRequest,
    chatbot: ChatBot = Depends(get_chatbot),
) -> TurnResponse:
    """
    Receives one user turn and answers it with the agent of the session mode.

    Args:
        session_id (str): Session receiving the turn.
        data (SendMessageRequest): Prompt text and optional image data URI.

    Returns:
        TurnResponse with the recorded user message and the reply. Agent
        failures are part of the reply (type "error"), not HTTP errors.
    """
    try:
        user_message, reply = chatbot.run(session_id, data.prompt, data.attachment)
    except SessionNotFoundError:
        raise _not_found(session_id)
    except TurnInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return TurnResponse(user_message=user_message, reply=reply)


@chat_router.delete(
    "/sessions/{session_id}/messages",
    response_model=SessionResponse,
    response_model_exclude_none=True,
)
def clear_messages(
    session_id: str,
    session_service: ChatSessionService = Depends(get_chat_session_service),
) -> SessionResponse:
    """Discard the conversation history of a session."""
    try:
        return _session_response(session_service.clear(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)


@chat_router.get(
    "/sessions/{session_id}/messages/{message_id}/audio",
    response_class=Response,
    responses={200: {"content": {"audio/wav": {}}}},
)
def get_message_audio(
    session_id: str,
    message_id: str,
    session_service: ChatSessionService = Depends(get_chat_session_service),
    process_audio: ProcessAudio = Depends(get_process_audio),
) -> Response:
    """Render the audio of a synthesized reply as a WAV file."""
    try:
        session = session_service.get(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)

    message = session.memory.find(message_id)
    if message is None or message.type != MessageType.AUDIO or message.metadata is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No audio message {message_id} in session {session_id}.",
        )
    try:
        wav_audio = process_audio.to_wav(
            message.metadata.audio_data or "", message.metadata.audio_mime_type
        )
    except AudioFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info("Serving audio of message %s", message_id)
    return Response(content=wav_audio.getvalue(), media_type="audio/wav")
