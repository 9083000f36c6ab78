"""Host clock implementation of TimeAuthorityProtocol."""

from __future__ import annotations

from datetime import datetime, timezone

from src.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Production clock, always UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
