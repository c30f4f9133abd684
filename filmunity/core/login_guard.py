"""
In-Memory Login Guard with temporary lockout.

Tracks failed login attempts per email. After `max_attempts` failures the
email is locked for `lockout_seconds`. An expired lockout does not reset the
counter; only a successful login does, so the next failure after an expired
lockout locks the email again.

Records with no active lock and no failure for `idle_seconds` are evicted,
on access and by a periodic sweep (see `cleanup_all`).

State lives in process memory and is lost on restart. For multiple backend
instances, provide another object with the same methods (e.g. Redis-backed)
through the `get_login_guard` dependency.
"""

import time
import logging
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Callable, Dict, Optional

from filmunity.core.config import get_settings
from filmunity.core.exceptions import LockedError

logger = logging.getLogger(__name__)


class LoginState(str, Enum):
    OPEN = "open"
    WARNING = "warning"
    LOCKED = "locked"


@dataclass
class LoginAttemptRecord:
    count: int = 0
    locked_until: Optional[float] = None
    last_failure_at: float = 0.0


class LoginGuard:
    """
    Thread-safe failure counter keyed by email.

    Every read-modify-write runs under a single lock, so concurrent failures
    for the same email are never lost.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        lockout_seconds: int = 15 * 60,
        idle_seconds: int = 60 * 60,
        cleanup_interval_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self.idle_seconds = idle_seconds
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self._clock = clock
        self._records: Dict[str, LoginAttemptRecord] = {}
        self._lock = Lock()
        self._last_cleanup = clock()

    def tracked_count(self) -> int:
        """Number of emails currently holding a record."""
        with self._lock:
            return len(self._records)

    def _is_locked(self, record: Optional[LoginAttemptRecord], now: float) -> bool:
        return bool(record and record.locked_until and record.locked_until > now)

    def _is_stale(self, record: LoginAttemptRecord, now: float) -> bool:
        return not self._is_locked(record, now) and now - record.last_failure_at >= self.idle_seconds

    def _get_live(self, email: str, now: float) -> Optional[LoginAttemptRecord]:
        """Record for an email, evicting it first if it has gone stale. Caller holds the lock."""
        record = self._records.get(email)
        if record is not None and self._is_stale(record, now):
            del self._records[email]
            return None
        return record

    def _cleanup_stale_records(self, now: float) -> int:
        """Drop every stale record. Caller holds the lock."""
        stale = [email for email, record in self._records.items() if self._is_stale(record, now)]
        for email in stale:
            del self._records[email]
        self._last_cleanup = now
        return len(stale)

    def state(self, email: str) -> LoginState:
        with self._lock:
            now = self._clock()
            record = self._get_live(email, now)
            if self._is_locked(record, now):
                return LoginState.LOCKED
            if record and record.count > 0:
                return LoginState.WARNING
            return LoginState.OPEN

    def get_record(self, email: str) -> Optional[LoginAttemptRecord]:
        """Return a copy of the record for an email, if one exists."""
        with self._lock:
            record = self._get_live(email, self._clock())
            if record is None:
                return None
            return LoginAttemptRecord(
                count=record.count,
                locked_until=record.locked_until,
                last_failure_at=record.last_failure_at,
            )

    def ensure_not_locked(self, email: str) -> None:
        """
        Raise LockedError while the email's lockout has not elapsed.

        The counter is left untouched.
        """
        with self._lock:
            now = self._clock()
            record = self._get_live(email, now)
            if not self._is_locked(record, now):
                return
            retry_after = max(int(record.locked_until - now) + 1, 1)

        logger.warning(f"Login rejected for locked account {email[:3]}***")
        raise LockedError(retry_after=retry_after)

    def record_failure(self, email: str) -> LoginAttemptRecord:
        """Count a failed attempt, locking the email once the limit is reached."""
        with self._lock:
            now = self._clock()
            if now - self._last_cleanup >= self.cleanup_interval_seconds:
                self._cleanup_stale_records(now)

            record = self._get_live(email, now)
            if record is None:
                record = self._records[email] = LoginAttemptRecord()
            record.count += 1
            record.last_failure_at = now
            if record.count >= self.max_attempts:
                record.locked_until = now + self.lockout_seconds
                logger.warning(
                    f"Account {email[:3]}*** locked for {self.lockout_seconds}s "
                    f"after {record.count} failed attempts"
                )
            return LoginAttemptRecord(
                count=record.count,
                locked_until=record.locked_until,
                last_failure_at=record.last_failure_at,
            )

    def record_success(self, email: str) -> None:
        """Reset the email back to OPEN."""
        with self._lock:
            self._records.pop(email, None)

    def cleanup_all(self) -> int:
        """Remove all stale records. Returns how many were dropped."""
        with self._lock:
            removed = self._cleanup_stale_records(self._clock())

        if removed:
            logger.debug(f"Login guard evicted {removed} idle records")
        return removed

    def reset_all(self) -> None:
        with self._lock:
            self._records.clear()


_login_guard: Optional[LoginGuard] = None


def get_login_guard() -> LoginGuard:
    """Get or create the process-wide login guard."""
    global _login_guard
    if _login_guard is None:
        settings = get_settings()
        _login_guard = LoginGuard(
            max_attempts=settings.login_max_attempts,
            lockout_seconds=settings.login_lockout_minutes * 60,
            idle_seconds=settings.login_record_ttl_minutes * 60,
        )
    return _login_guard
