"""
Provider Registry — factory functions to get the right provider by config.

Add a new provider? Just add an elif.
"""

from __future__ import annotations

import parley.core.config as config_module
from parley.providers.base import LLMProvider, STTProvider


def get_llm_provider() -> LLMProvider:
    llm_config = config_module.config.llm
    provider = llm_config.provider.lower()
    if provider == "openai":
        from parley.providers.openai_llm import OpenAILLMProvider

        return OpenAILLMProvider(llm_config)
    raise ValueError(f"Unknown LLM provider: {provider}")


def get_stt_provider() -> STTProvider:
    stt_config = config_module.config.stt
    provider = stt_config.provider.lower()
    if provider == "openai":
        from parley.providers.openai_stt import OpenAISTTProvider

        return OpenAISTTProvider(stt_config)
    raise ValueError(f"Unknown STT provider: {provider}")
