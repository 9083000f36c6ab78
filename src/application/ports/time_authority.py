"""Clock port.

Voting windows, cast-at stamps, review and decision timestamps all read the
injected clock; nothing in the domain or application layers asks the host
for the time.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Source of timezone-aware "now" for the balloting core.

    SystemTimeAuthority serves production; tests pin time with
    tests.helpers.FakeTimeAuthority.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current instant as an aware UTC datetime."""
        ...
