"""
Session management — per-user dialogue history held in memory.

Key components:
- Turn / Role: one immutable dialogue message
- Session: a user's ordered turns
- SessionStore: keyed in-memory store with atomic exchange appends
"""

from parley.session.models import Role, Session, Turn
from parley.session.store import SessionStore

__all__ = [
    "Role",
    "Turn",
    "Session",
    "SessionStore",
]
