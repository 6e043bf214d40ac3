from datetime import datetime, timedelta, timezone

UTC = timezone.utc


def at(year, month, day, hour=12, minute=0, tz=UTC):
    return datetime(year, month, day, hour, minute, tzinfo=tz)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
