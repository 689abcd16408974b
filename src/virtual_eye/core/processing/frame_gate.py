"""Drop-based rate limiting for frames headed to the inference worker."""

from __future__ import annotations

import threading
import time
from typing import Optional

from virtual_eye.utils.config_sections import FrameGateConfig, load_frame_gate_config


class FrameGate:
    """Admit at most one in-flight frame, spaced by a minimum interval.

    Frames that arrive while a request is outstanding, or too soon after the
    previous submission, are dropped and counted. Nothing is buffered.
    """

    def __init__(self, config: Optional[FrameGateConfig] = None) -> None:
        self.config = config or load_frame_gate_config()
        self.min_interval = max(0.0, float(self.config.min_interval))
        self._lock = threading.Lock()
        self._in_flight = False
        self._last_submit: Optional[float] = None
        self.submitted_frames = 0
        self.dropped_frames = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def try_acquire(self, now: Optional[float] = None) -> bool:
        """Return True if the caller may submit a frame now."""
        now = time.monotonic() if now is None else now
        with self._lock:
            too_soon = (
                self._last_submit is not None
                and now - self._last_submit < self.min_interval
            )
            if self._in_flight or too_soon:
                self.dropped_frames += 1
                return False
            self._in_flight = True
            self._last_submit = now
            self.submitted_frames += 1
            return True

    def release(self) -> None:
        """Mark the outstanding request as finished (result or failure received)."""
        with self._lock:
            self._in_flight = False

    def reset(self) -> None:
        with self._lock:
            self._in_flight = False
            self._last_submit = None


__all__ = ["FrameGate"]
