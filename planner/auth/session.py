"""
Password Gate Session

The planner is protected by one shared password. A successful login
starts a Session, which the Streamlit app keeps in st.session_state.

A session ends when either window closes:
- absolute: counted from login (30 days by default)
- idle: counted from the last renewal (15 minutes by default)

The app shows a renew prompt once the idle window is within the
warning period (1 minute by default). Every check takes `now`
explicitly, so expiry is a pure function of time.
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from planner.config import AuthSettings, get_settings
from planner.services.storage import utc_now


def validate_password(candidate: str, expected: Optional[str] = None) -> bool:
    """
    Compare a typed password with the configured one in constant time.

    Args:
        candidate: What the user typed
        expected: The secret; defaults to AUTH_PASSWORD from settings
    """
    if expected is None:
        expected = get_settings().auth.password
    if not candidate:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


class Session(BaseModel):
    """An authenticated session. Immutable; renew() returns a new one."""

    model_config = ConfigDict(frozen=True)

    issued_at: datetime = Field(..., description="Login time (UTC)")
    last_renewed_at: datetime = Field(..., description="Last activity renewal (UTC)")

    absolute_ttl: timedelta = Field(default=timedelta(days=30))
    idle_ttl: timedelta = Field(default=timedelta(minutes=15))
    warning_window: timedelta = Field(default=timedelta(seconds=60))

    @classmethod
    def start(
        cls,
        now: Optional[datetime] = None,
        settings: Optional[AuthSettings] = None,
    ) -> "Session":
        """Begin a session at `now`, with lifetimes taken from settings."""
        now = now or utc_now()
        settings = settings or get_settings().auth
        return cls(
            issued_at=now,
            last_renewed_at=now,
            absolute_ttl=timedelta(days=settings.absolute_ttl_days),
            idle_ttl=timedelta(minutes=settings.idle_ttl_minutes),
            warning_window=timedelta(seconds=settings.warning_seconds),
        )

    def renew(self, now: Optional[datetime] = None) -> "Session":
        """
        Restart the idle window.

        Renewing never extends the absolute window.
        """
        return self.model_copy(update={"last_renewed_at": now or utc_now()})

    @property
    def expires_at(self) -> datetime:
        """When the session ends if it is not renewed again."""
        return min(self.issued_at + self.absolute_ttl, self.last_renewed_at + self.idle_ttl)

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return (
            now - self.issued_at <= self.absolute_ttl
            and now - self.last_renewed_at <= self.idle_ttl
        )

    def remaining(self, now: Optional[datetime] = None) -> timedelta:
        """Time left before the session ends; never negative."""
        now = now or utc_now()
        return max(self.expires_at - now, timedelta(0))

    def should_warn(self, now: Optional[datetime] = None) -> bool:
        """True inside the warning period just before expiry."""
        left = self.remaining(now)
        return timedelta(0) < left <= self.warning_window
