"""
Sensor adapters: transcription, media capture and frame judgment.
"""

from mockinterview.sensors.base import FrameJudge, MediaCapture, TranscriptionService
from mockinterview.sensors.client_stream import ClientMediaStream, ClientTranscriptionStream

__all__ = [
    "FrameJudge",
    "MediaCapture",
    "TranscriptionService",
    "ClientMediaStream",
    "ClientTranscriptionStream",
]
