"""Named timers that accumulate duration statistics."""

from __future__ import annotations

import math
import threading
import time
from typing import Union

Key = Union[int, str]


def seconds_to_time_string(seconds: float) -> str:
    """Format seconds zero-padded to nine characters with six decimals."""
    return "%09.6f" % seconds


class _Accumulator:
    """Running count, sum, extremes, mean and variance of samples."""

    __slots__ = ("count", "total", "minimum", "maximum", "_mean", "_m2")

    def __init__(self) -> None:
        self.count = 0
        self.total = 0.0
        self.minimum = math.inf
        self.maximum = -math.inf
        self._mean = 0.0
        self._m2 = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)
        delta = value - self._mean
        self._mean += delta / self.count
        self._m2 += delta * (value - self._mean)

    @property
    def mean(self) -> float:
        return self._mean if self.count else 0.0

    @property
    def variance(self) -> float:
        return self._m2 / self.count if self.count else 0.0


class Timing:
    """Registry of timers identified by tag or by integer handle."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tags: dict[str, int] = {}
        self._timers: list[_Accumulator] = []
        self._max_tag_length = 0

    def get_handle(self, tag: str) -> int:
        """Return the handle of ``tag``, creating a timer if it is new."""
        with self._lock:
            handle = self._tags.get(tag)
            if handle is None:
                handle = len(self._timers)
                self._tags[tag] = handle
                self._timers.append(_Accumulator())
                self._max_tag_length = max(self._max_tag_length, len(tag))
            return handle

    def get_tag(self, handle: int) -> str:
        """Return the tag of ``handle``, or an empty string if none has it."""
        with self._lock:
            for tag, tag_handle in self._tags.items():
                if tag_handle == handle:
                    return tag
        return ""

    def _accumulator(self, key: Key) -> _Accumulator:
        handle = self.get_handle(key) if isinstance(key, str) else key
        with self._lock:
            if not 0 <= handle < len(self._timers):
                raise KeyError(f"no timer with handle {handle}")
            return self._timers[handle]

    def add_time(self, handle: int, seconds: float) -> None:
        accumulator = self._accumulator(handle)
        with self._lock:
            accumulator.add(seconds)

    def total_seconds(self, key: Key) -> float:
        return self._accumulator(key).total

    def mean_seconds(self, key: Key) -> float:
        return self._accumulator(key).mean

    def num_samples(self, key: Key) -> int:
        return self._accumulator(key).count

    def variance_seconds(self, key: Key) -> float:
        return self._accumulator(key).variance

    def min_seconds(self, key: Key) -> float:
        accumulator = self._accumulator(key)
        return accumulator.minimum if accumulator.count else 0.0

    def max_seconds(self, key: Key) -> float:
        accumulator = self._accumulator(key)
        return accumulator.maximum if accumulator.count else 0.0

    def report(self) -> str:
        """Return a table of all timers sorted by tag, or '' if there are none."""
        with self._lock:
            tags = sorted(self._tags.items())
            width = self._max_tag_length
        if not tags:
            return ""

        lines = ["SM Timing", "-----------"]
        for tag, handle in tags:
            count = self.num_samples(handle)
            line = f"{tag.ljust(width)}\t{count:>7}\t"
            if count > 0:
                fmt = seconds_to_time_string
                line += (
                    f"{fmt(self.total_seconds(handle))}\t"
                    f"({fmt(self.mean_seconds(handle))} +- "
                    f"{fmt(math.sqrt(self.variance_seconds(handle)))})\t"
                    f"[{fmt(self.min_seconds(handle))},"
                    f"{fmt(self.max_seconds(handle))}]"
                )
            lines.append(line)
        return "\n".join(lines) + "\n"

    def reset(self) -> None:
        """Forget all tags; existing handles keep their statistics."""
        with self._lock:
            self._tags.clear()


_GLOBAL_TIMING = Timing()


def global_timing() -> Timing:
    """Return the process-wide timing registry."""
    return _GLOBAL_TIMING


class Timer:
    """Measures wall time and records it in a :class:`Timing` registry."""

    def __init__(self, tag: Key, construct_stopped: bool = False,
                 timing: Timing | None = None) -> None:
        self._timing = global_timing() if timing is None else timing
        self.handle = tag if isinstance(tag, int) else self._timing.get_handle(tag)
        self._active = False
        self._started_at: float | None = None
        if not construct_stopped:
            self.start()

    def start(self) -> None:
        self._active = True
        self._started_at = time.perf_counter()

    def stop(self) -> None:
        if self._started_at is None:
            raise RuntimeError("timer was never started")
        elapsed = time.perf_counter() - self._started_at
        self._timing.add_time(self.handle, elapsed)
        self._active = False

    def is_timing(self) -> bool:
        return self._active

    def __enter__(self) -> "Timer":
        if not self._active:
            self.start()
        return self

    def __exit__(self, *args) -> None:
        if self._active:
            self.stop()