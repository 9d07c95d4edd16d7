# complement_engine/suggest/debounce.py
"""
Debouncer - one pending timer per debounced operation.

leading=True  : the first call of a burst runs at once; later calls inside the
                window are coalesced and the most recent one runs when the
                window elapses.
leading=False : nothing runs immediately; the most recent call runs when the
                window elapses.
reset_timer   : every call inside the window pushes the deadline back.

Timers come from a scheduler exposing `call_later(seconds, callback)` that
returns a handle with `cancel()`. By default that is the running asyncio loop,
so everything stays on the host's single event-loop thread.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class Debouncer:
    def __init__(self,
                 fn: Callable[..., Any],
                 delay_ms: float,
                 leading: bool = True,
                 reset_timer: bool = True,
                 scheduler: Optional[Scheduler] = None):
        self.fn = fn
        self.delay_ms = max(0.0, float(delay_ms))
        self.leading = leading
        self.reset_timer = reset_timer
        self._scheduler = scheduler
        self._handle: Optional[TimerHandle] = None
        self._pending: Optional[Tuple[Any, ...]] = None

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler or asyncio.get_running_loop()

    @property
    def is_pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        if self._handle is None:
            self._arm()
            if self.leading:
                self.fn(*args)
            else:
                self._pending = args
            return

        # inside the window: only the latest call survives
        self._pending = args
        if self.reset_timer:
            self._handle.cancel()
            self._arm()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None

    def _arm(self) -> None:
        self._handle = self.scheduler.call_later(self.delay_ms / 1000.0, self._fire)

    def _fire(self) -> None:
        self._handle = None
        args, self._pending = self._pending, None
        if args is not None:
            self.fn(*args)
