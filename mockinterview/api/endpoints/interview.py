"""
Interview API endpoints

Handles the live interview:
- Creating sessions (question generation)
- Session status
- The WebSocket that drives the interview room
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from mockinterview.api.dependencies import get_orchestrator
from mockinterview.core.errors import (
    DevicePermissionError,
    EvaluationError,
    QuestionGenerationError,
    StateTransitionError,
    TranscriptionError,
)
from mockinterview.core.recording import RecordingStateMachine
from mockinterview.models.session import InterviewConfig
from mockinterview.sensors.client_stream import ClientMediaStream, ClientTranscriptionStream

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class SetupRequest(BaseModel):
    """Request model for interview setup."""
    role: str = Field(..., min_length=1)
    difficulty: str = Field(default="Mid-Level", min_length=1)


class SetupResponse(BaseModel):
    """Response model for interview setup."""
    session_id: str
    status: str
    questions: list[str]
    message: str


class SessionStatusResponse(BaseModel):
    """Response for session status."""
    session_id: str
    state: str
    question_index: int
    question_count: int
    question: str | None = None
    connected: bool
    status: dict[str, Any] | None = None


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/setup", response_model=SetupResponse)
async def setup_interview(request: SetupRequest) -> SetupResponse:
    """
    Create a new interview session.

    Generates the question set and discards any existing draft. The
    interview itself runs over the WebSocket.
    """
    orchestrator = get_orchestrator()
    config = InterviewConfig(role=request.role.strip(), difficulty=request.difficulty.strip())

    try:
        session = await orchestrator.create_session(config)
    except QuestionGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return SetupResponse(
        session_id=session.session_id,
        status="created",
        questions=session.questions,
        message="Interview session created. Connect to the WebSocket to begin.",
    )


@router.get("/{session_id}", response_model=SessionStatusResponse)
async def get_session_status(session_id: str) -> SessionStatusResponse:
    """Get the current status of an in-progress interview."""
    orchestrator = get_orchestrator()
    progress = orchestrator.get_progress(session_id)

    if not progress:
        raise HTTPException(status_code=404, detail="Session not found")

    monitor = orchestrator.get_monitor(session_id)
    return SessionStatusResponse(
        session_id=session_id,
        state=monitor.state.value if monitor else "idle",
        question_index=progress.current_question_index,
        question_count=progress.question_count,
        question=progress.current_question,
        connected=monitor is not None,
        status=monitor.snapshot_status() if monitor else None,
    )


# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

async def _send_error(websocket: WebSocket, code: str, message: str) -> None:
    await websocket.send_json({"type": "error", "code": code, "message": message})


async def _handle_command(
    websocket: WebSocket,
    machine: RecordingStateMachine,
    media: ClientMediaStream,
    message_type: str,
    data: dict[str, Any],
) -> bool:
    """Run one room command. Returns False when the room should close."""
    try:
        if message_type == "open":
            media.report_permission(bool(data.get("granted", True)), data.get("error"))
            await machine.open()

        elif message_type == "start":
            await machine.start()

        elif message_type == "pause":
            await machine.pause()

        elif message_type == "resume":
            await machine.resume()

        elif message_type == "next":
            bundle = await machine.advance()
            if bundle is not None:
                return False

        elif message_type == "save_draft":
            await machine.save_draft()

        elif message_type == "status":
            await websocket.send_json({"type": "status", "data": machine.snapshot_status()})

        elif message_type == "ping":
            await websocket.send_json({"type": "pong"})

        else:
            await _send_error(websocket, "unknown_message", f"Unknown message type: {message_type}")

    except DevicePermissionError as e:
        await _send_error(websocket, "permission_denied", str(e))
    except StateTransitionError as e:
        await _send_error(websocket, "invalid_state", str(e))
    except TranscriptionError as e:
        await _send_error(websocket, "transcription", e.user_message())
    except EvaluationError as e:
        logger.error(f"Completion failed: {e}")
        await _send_error(
            websocket,
            "evaluation_failed",
            "We couldn't evaluate your interview. Please try again.",
        )
        return False

    return True


@router.websocket("/ws/{session_id}")
async def websocket_interview(websocket: WebSocket, session_id: str):
    """
    WebSocket endpoint for the live interview room.

    Commands:
    - open, start, pause, resume, next, save_draft, status, ping

    Sensor messages (from the browser):
    - frame: {"image": <base64 jpeg>}
    - audio_level: {"level": float} or {"bins": [int, ...]}
    - transcript: {"final": [str, ...], "interim": str | null}
    - transcript_end
    - transcript_error: {"error": <speech error code>}
    - any transcript message may carry the "stream" number it belongs to

    Server sends:
    - state_change, question, transcript, alert, alert_cleared, coaching,
      coaching_cleared, status, draft_saved, complete, error
    - transcription: {"action": "start" | "stop", "stream": int} for the speech engine
    """
    await websocket.accept()

    orchestrator = get_orchestrator()

    if not orchestrator.get_progress(session_id):
        await websocket.close(code=4004, reason="Session not found")
        return

    media = ClientMediaStream(max_frame_age=orchestrator.settings.frame_max_age_seconds)
    transcription = ClientTranscriptionStream(send=websocket.send_json)
    try:
        machine = orchestrator.attach_monitor(
            session_id,
            transcription=transcription,
            media=media,
            emit=websocket.send_json,
        )
    except ValueError:
        await websocket.close(code=4009, reason="Session already connected")
        return

    try:
        while True:
            data = await websocket.receive_json()
            message_type = data.get("type")

            if message_type == "frame":
                media.push_frame(data.get("image") or "")

            elif message_type == "audio_level":
                media.push_audio_level(level=data.get("level"), bins=data.get("bins"))

            elif message_type == "transcript":
                await transcription.feed_result(
                    data.get("final") or [], data.get("interim"), stream=data.get("stream")
                )

            elif message_type == "transcript_end":
                await transcription.feed_end(stream=data.get("stream"))

            elif message_type == "transcript_error":
                await transcription.feed_error(
                    data.get("error") or "unknown", data.get("message"), stream=data.get("stream")
                )

            elif not await _handle_command(websocket, machine, media, message_type, data):
                break

    except WebSocketDisconnect:
        # Client disconnected; the last autosaved draft survives
        logger.info(f"Interview room disconnected: {session_id}")
    finally:
        await orchestrator.detach_monitor(session_id)
