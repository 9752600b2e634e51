"""
Bot Package — inbound events to services.

- AuthorizationGate: allow-list check applied to every event
- CommandRouter: start / teach / reset / text / voice dispatch
- telegram: python-telegram-bot binding (kept out of this namespace so
  the router can be used without the transport installed)
"""

from parley.bot.gate import AuthorizationGate
from parley.bot.router import CommandRouter, EventKind, InboundEvent

__all__ = [
    "AuthorizationGate",
    "CommandRouter",
    "EventKind",
    "InboundEvent",
]
