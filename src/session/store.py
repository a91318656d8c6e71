from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from cryptography.fernet import Fernet, InvalidToken

from .models import Session


# Environment variable names for convenience configuration
ENV_SESSION_FILE = "WEBOOK_SESSION_FILE"
ENV_SESSION_KEY = "WEBOOK_SESSION_KEY"

# Names of the two persisted entries
TOKEN_KEY = "token"
USER_ID_KEY = "userId"


@runtime_checkable
class SessionStore(Protocol):
    """Synchronous key/value persistence for the current session.

    Implementations hold exactly two entries (token, user id). A stored token
    stays present until `clear()`; no expiry is applied.
    """

    def get(self) -> Session: ...

    def set_token(self, token: str) -> None: ...

    def set_user_id(self, user_id: str) -> None: ...

    def clear(self) -> None: ...


def _to_fernet(key: str | bytes) -> Fernet:
    """Construct a Fernet instance from a user-provided key.

    The key must be a URL-safe base64-encoded 32-byte key (str or bytes),
    as returned by `cryptography.fernet.Fernet.generate_key()`.
    """
    if isinstance(key, str):
        key_bytes = key.encode("utf-8")
    else:
        key_bytes = key
    return Fernet(key_bytes)


def _session_from_entries(entries: Dict[str, str]) -> Session:
    return Session(token=entries.get(TOKEN_KEY), user_id=entries.get(USER_ID_KEY))


class MemorySessionStore:
    """In-process session store; contents vanish with the process."""

    def __init__(self, *, token: Optional[str] = None, user_id: Optional[str] = None) -> None:
        self._entries: Dict[str, str] = {}
        if token is not None:
            self._entries[TOKEN_KEY] = token
        if user_id is not None:
            self._entries[USER_ID_KEY] = user_id

    def get(self) -> Session:
        return _session_from_entries(self._entries)

    def set_token(self, token: str) -> None:
        self._entries[TOKEN_KEY] = token

    def set_user_id(self, user_id: str) -> None:
        self._entries[USER_ID_KEY] = str(user_id)

    def clear(self) -> None:
        self._entries.clear()


class FileSessionStore:
    """
    File-backed session store, encrypted at rest using Fernet.

    - Backed by a single file holding the Fernet-encrypted JSON
      `{"token": ..., "userId": ...}`.
    - Survives process restarts; entries are only removed by `clear()`.
    - A missing file reads as an empty session.
    - Every operation hits the file, so two stores pointed at the same path
      observe each other's writes. Concurrent writers are not coordinated.

    Environment variables (optional)
    - `WEBOOK_SESSION_FILE`: path of the session file
    - `WEBOOK_SESSION_KEY`:  urlsafe base64-encoded key for Fernet
    """

    def __init__(self, path: os.PathLike[str] | str, *, fernet_key: str | bytes) -> None:
        self._path = Path(path)
        self._fernet = _to_fernet(fernet_key)

    # -------- Construction helpers --------
    @classmethod
    def from_env(cls) -> "FileSessionStore":
        path = os.environ.get(ENV_SESSION_FILE)
        fkey = os.environ.get(ENV_SESSION_KEY)
        if not path or not fkey:
            missing = [name for name, val in [(ENV_SESSION_FILE, path), (ENV_SESSION_KEY, fkey)] if not val]
            raise RuntimeError(
                f"Missing required environment variables for session store: {', '.join(missing)}"
            )
        return cls(path, fernet_key=fkey)

    @property
    def path(self) -> Path:
        return self._path

    # -------- Core operations --------
    def get(self) -> Session:
        """Read and decrypt the session.

        Raises ValueError if the file cannot be decrypted or is not valid JSON.
        """
        return _session_from_entries(self._read_entries())

    def set_token(self, token: str) -> None:
        entries = self._read_entries()
        entries[TOKEN_KEY] = token
        self._write_entries(entries)

    def set_user_id(self, user_id: str) -> None:
        entries = self._read_entries()
        entries[USER_ID_KEY] = str(user_id)
        self._write_entries(entries)

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass

    # -------- Internal --------
    def _read_entries(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        ciphertext = self._path.read_bytes()
        try:
            plaintext = self._fernet.decrypt(ciphertext)
        except InvalidToken as ex:
            raise ValueError("Failed to decrypt session: invalid Fernet token") from ex

        try:
            raw = json.loads(plaintext.decode("utf-8"))
        except Exception as ex:
            raise ValueError("Failed to parse decrypted session JSON") from ex
        if not isinstance(raw, dict):
            raise ValueError("Session file does not hold a JSON object")
        # Only the two known entries are kept
        return {k: str(v) for k, v in raw.items() if k in (TOKEN_KEY, USER_ID_KEY) and v is not None}

    def _write_entries(self, entries: Dict[str, str]) -> None:
        # Deterministic JSON: stable key order, no extra whitespace
        plaintext = json.dumps(entries, separators=(",", ":"), sort_keys=True).encode("utf-8")
        ciphertext = self._fernet.encrypt(plaintext)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_bytes(ciphertext)
        os.replace(tmp, self._path)
