"""
Session Store - per-client key/value state.

One Session per client identity, created on first use and kept for the
process lifetime. Each Session guards its mapping with a reader/writer lock:
readers share, a writer excludes everyone else on that session.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple
import threading

import structlog

logger = structlog.get_logger(__name__)


class ReadWriteLock:
    """
    Writer-preferring reader/writer lock.

    Readers wait while a writer holds the lock or is queued for it, so a
    steady stream of readers cannot starve writers.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class Session:
    """Mutable key/value state bound to one client identity."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        self._values: Dict[str, Any] = {}
        self._lock = ReadWriteLock()

    def get(self, key: str) -> Tuple[Any, bool]:
        """Return (value, found) for key."""
        with self._lock.read_locked():
            if key in self._values:
                return self._values[key], True
            return None, False

    def set(self, key: str, value: Any) -> None:
        with self._lock.write_locked():
            self._values[key] = value

    def snapshot(self) -> Dict[str, Any]:
        """Shallow copy of the current mapping."""
        with self._lock.read_locked():
            return dict(self._values)

    def __repr__(self) -> str:
        return f"Session(identity={self.identity!r})"


class SessionStore:
    """
    Tracks one Session per client identity.

    get_or_create() is idempotent: the same identity always yields the same
    Session instance. Sessions are never evicted.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def get_or_create(self, identity: str) -> Session:
        session = self._sessions.get(identity)
        if session is not None:
            return session

        with self._lock:
            session = self._sessions.get(identity)
            if session is None:
                session = Session(identity)
                self._sessions[identity] = session
                logger.info("Session created", identity=identity, total_sessions=len(self._sessions))
            return session

    def get(self, identity: str) -> Optional[Session]:
        """Return an existing session without creating one."""
        return self._sessions.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
