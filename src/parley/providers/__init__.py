"""
Parley Providers — abstract interfaces for chat completion and STT.

Concrete implementations (OpenAI) live alongside. Swap providers by
changing config.
"""

from parley.providers.base import LLMProvider, RemoteServiceError, STTProvider
from parley.providers.registry import get_llm_provider, get_stt_provider

__all__ = [
    "LLMProvider",
    "STTProvider",
    "RemoteServiceError",
    "get_llm_provider",
    "get_stt_provider",
]
