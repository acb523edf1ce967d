"""
Time sources for the scheduling engine.

Every service takes an optional clock so that escalation, "today" and
schedule-availability are all computed from one injected point in time.
"""
from datetime import datetime

from django.utils import timezone


class SystemClock:
    """Wall clock in the configured clinic time zone"""

    def now(self) -> datetime:
        return timezone.now()

    def today(self):
        return timezone.localdate(self.now())

    def local_now(self) -> datetime:
        return timezone.localtime(self.now())


class FixedClock(SystemClock):
    """Clock frozen at a given instant, moved explicitly with advance()"""

    def __init__(self, instant: datetime):
        if timezone.is_naive(instant):
            instant = timezone.make_aware(instant)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta):
        self.instant = self.instant + delta
        return self.instant


default_clock = SystemClock()
