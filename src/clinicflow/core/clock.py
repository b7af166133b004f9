"""Virtual clock mapping real elapsed time onto simulation ticks."""

from typing import Optional


class VirtualClock:
    """Converts real elapsed milliseconds into ticks and simulated minutes.

    Real time accumulates until a whole tick is due; the fractional
    remainder carries over to the next call. Pausing is done by the
    caller simply not advancing the clock.

    Attributes:
        minutes_per_tick: Simulated minutes added per tick.
        ms_per_tick: Real milliseconds that make one tick.
        session_ticks: Tick count at which the session ends (None = never).
        ticks: Ticks elapsed so far.
    """

    def __init__(
        self,
        minutes_per_tick: float,
        ms_per_tick: float,
        session_ticks: Optional[int] = None,
    ):
        self.minutes_per_tick = minutes_per_tick
        self.ms_per_tick = ms_per_tick
        self.session_ticks = session_ticks
        self.ticks = 0
        self._pending_ms = 0.0

    @property
    def minutes(self) -> float:
        """Total simulated minutes elapsed."""
        return self.ticks * self.minutes_per_tick

    @property
    def session_minutes(self) -> Optional[float]:
        if self.session_ticks is None:
            return None
        return self.session_ticks * self.minutes_per_tick

    @property
    def progress(self) -> float:
        """Fraction of the session elapsed (0.0 when uncapped)."""
        if not self.session_ticks:
            return 0.0
        return min(1.0, self.ticks / self.session_ticks)

    def is_session_over(self) -> bool:
        """True once the configured session length has been reached."""
        return self.session_ticks is not None and self.ticks >= self.session_ticks

    def ticks_due(self, elapsed_ms: float) -> int:
        """Accumulate real time and return how many ticks are now due.

        Never returns more ticks than remain in the session.

        Args:
            elapsed_ms: Real milliseconds since the previous call.

        Raises:
            ValueError: If elapsed_ms is negative.
        """
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be >= 0, got {elapsed_ms}")

        self._pending_ms += elapsed_ms
        due = int(self._pending_ms // self.ms_per_tick)
        self._pending_ms -= due * self.ms_per_tick

        if self.session_ticks is not None:
            due = min(due, max(0, self.session_ticks - self.ticks))
        return due

    def tick(self) -> None:
        """Advance the clock by exactly one tick."""
        self.ticks += 1

    def reset(self) -> None:
        self.ticks = 0
        self._pending_ms = 0.0


def format_clock(minutes: float, start_hour: int = 9) -> str:
    """Format simulated minutes since opening as a wall-clock time.

    >>> format_clock(270)
    '1:30 PM'
    """
    h = int(start_hour + minutes // 60) % 24
    m = int(minutes % 60)
    ampm = "PM" if h >= 12 else "AM"
    h12 = h % 12 or 12
    return f"{h12}:{m:02d} {ampm}"
