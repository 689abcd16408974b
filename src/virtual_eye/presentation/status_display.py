"""OpenCV status display: camera preview with the current narration band."""

from __future__ import annotations

import logging
import textwrap
from typing import Optional

import cv2
import numpy as np

from virtual_eye.utils.config import Config

log = logging.getLogger("StatusDisplay")


class StatusDisplay:
    """Draws the status text under the preview and shows it in a window."""

    def __init__(self, window_name: Optional[str] = None, *, show: bool = True) -> None:
        self.window_name = window_name or Config.DISPLAY_WINDOW_NAME
        self.band_height = Config.DISPLAY_BAND_HEIGHT
        self.font_scale = Config.DISPLAY_FONT_SCALE
        self.show = show
        self._window_open = False

    def render(self, frame: np.ndarray, text: str, level: str) -> np.ndarray:
        """Return a copy of ``frame`` with the status band appended below it."""
        height, width = frame.shape[:2]
        color = Config.STATUS_COLORS.get(level, Config.STATUS_COLORS["info"])

        band = np.zeros((self.band_height, width, 3), dtype=np.uint8)
        band[:] = color

        max_chars = max(10, int(width / (18 * self.font_scale)))
        lines = textwrap.wrap(text, width=max_chars)[:3] or [""]
        line_height = self.band_height // (len(lines) + 1)
        for i, line in enumerate(lines, start=1):
            cv2.putText(
                band,
                line,
                (10, i * line_height + 5),
                cv2.FONT_HERSHEY_SIMPLEX,
                self.font_scale,
                (255, 255, 255),
                2,
                cv2.LINE_AA,
            )

        if frame.ndim == 2:
            frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        return np.vstack([frame, band])

    def update(self, frame: np.ndarray, text: str, level: str) -> int:
        """Render and show; returns the pressed key code (-1 if none)."""
        composed = self.render(frame, text, level)
        if not self.show:
            return -1
        cv2.imshow(self.window_name, composed)
        self._window_open = True
        key = cv2.waitKey(1)
        return key & 0xFF if key != -1 else -1

    def close(self) -> None:
        if self._window_open:
            cv2.destroyWindow(self.window_name)
            self._window_open = False
