"""
Client-side authentication session.

This package holds the session model and its stores: an in-memory one and a
Fernet-encrypted file that survives restarts. Login/logout flows live in
`session.auth`.
"""

from .models import Session
from .store import FileSessionStore, MemorySessionStore, SessionStore

__all__ = ["Session", "SessionStore", "MemorySessionStore", "FileSessionStore"]
