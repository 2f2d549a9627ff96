from datetime import datetime, timedelta

import pytest


def local(*args) -> datetime:
    """Timezone-aware local time, the same kind the tracker stores."""
    return datetime(*args).astimezone()


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(local(2026, 2, 3, 9, 0, 0))
