"""Wall-clock timing in millisecond ticks, and the context-count argument."""

import time

from .crc import parseval

NSECS_PER_SEC = 1_000_000_000
TIMER_RES_DIVIDER = 1_000_000
TICKS_PER_SEC = NSECS_PER_SEC // TIMER_RES_DIVIDER


def _trunc_div(numerator, denominator):
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


class Timer:
    """Measures the time between :meth:`start` and :meth:`stop` in ticks.

    ``clock`` returns the current real time in nanoseconds; one tick is a
    millisecond. The timer can also be used as a context manager.
    """

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._start = None
        self._stop = None

    def start(self):
        """Record the start of the timed section."""
        self._start = self._clock()
        self._stop = None

    def stop(self):
        """Record the end of the timed section."""
        if self._start is None:
            raise RuntimeError("timer stopped before it was started")
        self._stop = self._clock()

    def get_time(self):
        """Return the ticks elapsed between start and stop."""
        if self._start is None or self._stop is None:
            raise RuntimeError("timer has not been started and stopped")
        fin_sec, fin_nsec = divmod(self._stop, NSECS_PER_SEC)
        ini_sec, ini_nsec = divmod(self._start, NSECS_PER_SEC)
        return (fin_sec - ini_sec) * TICKS_PER_SEC + _trunc_div(
            fin_nsec - ini_nsec, TIMER_RES_DIVIDER
        )

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


def time_in_secs(ticks):
    """Convert ticks from :meth:`Timer.get_time` to seconds."""
    return ticks / TICKS_PER_SEC


def split_context_arg(argv, max_contexts):
    """Take a leading ``M<n>`` argument that sets the number of contexts.

    Returns ``(contexts, remaining_argv)``. When ``argv[1]`` starts with
    ``M`` its number (capped at ``max_contexts``) is used and the argument is
    removed; otherwise ``max_contexts`` is returned with ``argv`` unchanged.
    """
    args = list(argv)
    if len(args) > 1 and args[1].startswith("M"):
        contexts = parseval(args[1][1:]) & 0xFFFFFFFF
        contexts = min(contexts, max_contexts)
        del args[1]
        return contexts, args
    return max_contexts, args