"""
Services Package — the conversation pipeline.

- DialogueEngine: session-aware chat completion
- TranscriptionPipeline: voice message → transcript → dialogue
"""

from parley.services.dialogue import DialogueEngine
from parley.services.transcription import TranscriptionJob, TranscriptionPipeline

__all__ = [
    "DialogueEngine",
    "TranscriptionJob",
    "TranscriptionPipeline",
]
