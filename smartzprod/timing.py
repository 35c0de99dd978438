# ==============================================
# Deferral: Debouncer / Throttler
# ==============================================
#
# PURPOSE:
#   Rate-limit field validation handlers without timers or threads.
#   Both classes are driven by an injectable clock and by the caller
#   on its own thread, the same way the tracker checks deadlines.
#
# CLASSES:
# --------
# - Debouncer(func, wait_seconds, clock=time.monotonic)
#     Latest call in the window wins.
#     - call(*args, **kwargs) → store args, push the deadline back
#     - poll() -> bool        → run the pending call once the window
#                               has passed with no newer call
#     - flush() -> bool       → run the pending call now
#     - cancel()              → drop the pending call
#     - pending (property)
#
# - Throttler(func, limit_seconds, clock=time.monotonic)
#     First call in the window wins, extra calls are dropped.
#     - call(*args, **kwargs) -> bool
#
# ==============================================

import time
from typing import Any, Callable, Dict, Optional, Tuple

Clock = Callable[[], float]


class Debouncer:
    """Run `func` once calls have stopped arriving for `wait_seconds`."""

    def __init__(self, func: Callable[..., Any], wait_seconds: float = 0.2,
                 clock: Clock = time.monotonic):
        if wait_seconds < 0:
            raise ValueError("wait_seconds must not be negative")
        self.func = func
        self.wait_seconds = wait_seconds
        self._clock = clock
        self._deadline: Optional[float] = None
        self._args: Tuple[Any, ...] = ()
        self._kwargs: Dict[str, Any] = {}
        self.last_result: Any = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def call(self, *args, **kwargs) -> None:
        self._args = args
        self._kwargs = kwargs
        self._deadline = self._clock() + self.wait_seconds

    def poll(self) -> bool:
        """
        Run the pending call if its window has passed.

        Returns:
            True if the wrapped function ran
        """
        if self._deadline is None or self._clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self._deadline is None:
            return False
        args, kwargs = self._args, self._kwargs
        self.cancel()
        self.last_result = self.func(*args, **kwargs)
        return True

    def cancel(self) -> None:
        self._deadline = None
        self._args = ()
        self._kwargs = {}


class Throttler:
    """Run `func` at most once per `limit_seconds`; extra calls are dropped."""

    def __init__(self, func: Callable[..., Any], limit_seconds: float = 0.2,
                 clock: Clock = time.monotonic):
        if limit_seconds < 0:
            raise ValueError("limit_seconds must not be negative")
        self.func = func
        self.limit_seconds = limit_seconds
        self._clock = clock
        self._last_run: Optional[float] = None
        self.last_result: Any = None

    def call(self, *args, **kwargs) -> bool:
        """
        Run the wrapped function if the window is open.

        Returns:
            True if it ran, False if the call was dropped
        """
        now = self._clock()
        if self._last_run is not None and now - self._last_run < self.limit_seconds:
            return False
        self._last_run = now
        self.last_result = self.func(*args, **kwargs)
        return True

    def reset(self) -> None:
        self._last_run = None
