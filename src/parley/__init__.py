"""Parley — personal Telegram chat assistant bridged to OpenAI."""

__version__ = "0.1.0"
