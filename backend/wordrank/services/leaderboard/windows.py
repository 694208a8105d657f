from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class WindowKind(str, Enum):
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    CHALLENGE = 'challenge'

    @classmethod
    def parse(cls, value: str) -> Optional['WindowKind']:
        try:
            return cls((value or '').lower())
        except ValueError:
            return None


def window_start(window: WindowKind, now: datetime) -> Optional[datetime]:
    """Inclusive lower bound of ``window`` relative to ``now``.

    Weekly windows open Monday 00:00 (ISO week), monthly windows open on the
    first of the month at 00:00. The challenge track is unbounded.
    """
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if window is WindowKind.WEEKLY:
        return midnight - timedelta(days=midnight.weekday())
    if window is WindowKind.MONTHLY:
        return midnight.replace(day=1)
    return None
