"""
Chess clock: initial time per player plus an optional increment per move.

The rules engine never reads the clock. Whoever drives the game tells the clock a ply was completed,
and asks it whether a flag has fallen.
"""

import time
from typing import Callable, Optional

from chesscore.chess.pieces import Color

TimeSource = Callable[[], float]


class Clock:
    def __init__(
        self,
        initial_time: float,
        increment: float = 0,
        now: TimeSource = time.monotonic,
    ) -> None:
        self.remaining: dict[Color, float] = {color: float(initial_time) for color in Color}
        self.increment = float(increment)
        self._now = now
        self._active_color: Optional[Color] = None
        self._move_started_at: Optional[float] = None

    @property
    def active_color(self) -> Optional[Color]:
        """The color currently on the clock (None if the clock is stopped)"""
        return self._active_color

    def is_active(self) -> bool:
        return self._active_color is not None

    def start(self, color: Color) -> None:
        """Start timing a move. A move that was still running gets stopped first."""
        if self.is_active():
            self.stop()
        self._active_color = color
        self._move_started_at = self._now()

    def stop(self) -> float:
        """Stop timing the current move, credit the increment and return the seconds used."""
        if self._active_color is None or self._move_started_at is None:
            return 0.0

        time_used = self._now() - self._move_started_at
        self.remaining[self._active_color] += self.increment - time_used

        self._active_color = None
        self._move_started_at = None
        return time_used

    def ply_completed(self, color: Color) -> float:
        """`color` just moved: stop their time and start the opponent's."""
        time_used = self.stop()
        self.start(color.opponent)
        return time_used

    def time_for(self, color: Color) -> float:
        """Remaining seconds, including the time the running move has used so far"""
        remaining = self.remaining[color]
        if self._active_color == color and self._move_started_at is not None:
            remaining -= self._now() - self._move_started_at
        return remaining

    def is_expired(self, color: Color) -> bool:
        return self.time_for(color) <= 0

    def formatted(self, color: Color) -> str:
        return format_time(self.time_for(color))


def format_time(seconds: float) -> str:
    """M:SS, or H:MM:SS once there is an hour or more on the clock"""
    if seconds <= 0:
        return "0:00"

    total_seconds = int(seconds)
    hours, rest = divmod(total_seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
