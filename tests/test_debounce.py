# tests/test_debounce.py
# Debouncer against the fake call_later clock (conftest), plus one run on a real loop

import asyncio

from complement_engine.suggest.debounce import Debouncer


def test_leading_call_runs_immediately(clock):
    calls = []
    d = Debouncer(calls.append, 100, scheduler=clock)
    d("a")
    assert calls == ["a"]
    assert d.is_pending


def test_burst_coalesces_to_latest(clock):
    calls = []
    d = Debouncer(calls.append, 100, scheduler=clock)
    d("a")
    d("b")
    d("c")
    assert calls == ["a"]
    clock.advance(100)
    assert calls == ["a", "c"]
    assert not d.is_pending


def test_reset_timer_pushes_deadline(clock):
    calls = []
    d = Debouncer(calls.append, 100, scheduler=clock)
    d("a")
    clock.advance(60)
    d("b")
    clock.advance(60)
    assert calls == ["a"]
    clock.advance(40)
    assert calls == ["a", "b"]


def test_without_reset_fires_at_first_deadline(clock):
    calls = []
    d = Debouncer(calls.append, 100, reset_timer=False, scheduler=clock)
    d("a")
    clock.advance(60)
    d("b")
    clock.advance(40)
    assert calls == ["a", "b"]


def test_trailing_only(clock):
    calls = []
    d = Debouncer(calls.append, 50, leading=False, scheduler=clock)
    d("a")
    assert calls == []
    clock.advance(50)
    assert calls == ["a"]


def test_window_closes_and_next_call_leads_again(clock):
    calls = []
    d = Debouncer(calls.append, 100, scheduler=clock)
    d("a")
    clock.advance(100)
    d("b")
    assert calls == ["a", "b"]


def test_cancel_drops_pending(clock):
    calls = []
    d = Debouncer(calls.append, 100, scheduler=clock)
    d("a")
    d("b")
    d.cancel()
    clock.advance(200)
    assert calls == ["a"]


def test_default_scheduler_is_running_loop():
    calls = []

    async def go():
        d = Debouncer(calls.append, 10, leading=False)
        d("x")
        await asyncio.sleep(0.05)

    asyncio.run(go())
    assert calls == ["x"]
