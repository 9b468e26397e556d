from __future__ import annotations

import threading
import uuid

from .models import ChatMessage

# Transcripts live server-side; the session cookie only carries the id.
_histories: dict[str, list[ChatMessage]] = {}
_locks: dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()


def new_session_id() -> str:
    return uuid.uuid4().hex


def session_lock(session_id: str) -> threading.Lock:
    """Lock used to run one turn at a time per chat session."""
    with _registry_lock:
        lock = _locks.get(session_id)
        if lock is None:
            lock = _locks[session_id] = threading.Lock()
        return lock


def get_history(session_id: str) -> list[ChatMessage]:
    return list(_histories.get(session_id, []))


def save_history(session_id: str, history: list[ChatMessage]) -> None:
    _histories[session_id] = list(history)


def reset_history(session_id: str) -> None:
    """Forget the transcript and its lock."""
    _histories.pop(session_id, None)
    with _registry_lock:
        _locks.pop(session_id, None)


def clear_sessions() -> None:
    _histories.clear()
    with _registry_lock:
        _locks.clear()
