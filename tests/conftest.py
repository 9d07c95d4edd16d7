# tests/conftest.py
# shared fixtures: a fake call_later clock for debounced code

import pytest


class FakeHandle:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Minimal scheduler: call_later + advance(ms). Time is kept in whole milliseconds."""

    def __init__(self):
        self.now = 0
        self.handles = []

    def call_later(self, delay, callback, *args):
        h = FakeHandle(self.now + round(delay * 1000), lambda: callback(*args))
        self.handles.append(h)
        return h

    def advance(self, ms):
        self.now += ms
        due = [h for h in self.handles if not h.cancelled and h.when <= self.now]
        self.handles = [h for h in self.handles if h not in due and not h.cancelled]
        for h in due:
            h.callback()


@pytest.fixture
def clock():
    return FakeClock()
