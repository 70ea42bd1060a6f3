"""Durable "has an active session" indicator stores."""

from salesdesk.adapters.session_flag.stores import (
    SESSION_FLAG_KEY,
    FileSessionFlagStore,
    MemorySessionFlagStore,
    SessionFlagStore,
)

__all__ = [
    "SESSION_FLAG_KEY",
    "FileSessionFlagStore",
    "MemorySessionFlagStore",
    "SessionFlagStore",
]
