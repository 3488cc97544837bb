from datetime import datetime, timezone
from typing import Callable

# Anything returning a timezone-aware "now" can be injected where a service needs time.
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)
