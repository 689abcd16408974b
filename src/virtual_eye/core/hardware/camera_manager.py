"""
Camera discovery and capture management.

This module handles the OpenCV interaction with local cameras:
- Device discovery (scanning capture indices)
- Opening a chosen camera at the configured resolution
- Frame reads
- Pause/resume lifecycle (release while paused, reopen on resume)

The list of cameras is a value returned by enumerate_cameras() and handed to
whoever needs it; nothing is stored at module level.

Usage:
    cameras = enumerate_cameras()
    camera = CameraManager(cameras[0])
    camera.open()
    ok, frame = camera.read()
    camera.release()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import cv2
import numpy as np

from virtual_eye.utils.config_sections import CameraConfig, load_camera_config

log = logging.getLogger("CameraManager")


class CameraError(RuntimeError):
    """Raised when a camera cannot be opened."""


@dataclass(frozen=True)
class CameraDescription:
    index: int
    width: int
    height: int

    @property
    def name(self) -> str:
        return f"camera-{self.index}"


def enumerate_cameras(
    max_index: Optional[int] = None,
    *,
    capture_factory: Callable[[int], "cv2.VideoCapture"] = cv2.VideoCapture,
) -> List[CameraDescription]:
    """Try capture indices [0, max_index) and describe the ones that open."""
    if max_index is None:
        max_index = load_camera_config().scan_max_index

    cameras: List[CameraDescription] = []
    for index in range(max_index):
        capture = capture_factory(index)
        try:
            if not capture.isOpened():
                continue
            width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
            height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
            cameras.append(CameraDescription(index=index, width=width, height=height))
        finally:
            capture.release()

    log.info("Found %s cameras", len(cameras))
    return cameras


class CameraManager:
    """Owns one OpenCV capture for the selected camera."""

    def __init__(
        self,
        description: CameraDescription,
        config: Optional[CameraConfig] = None,
        *,
        capture_factory: Callable[[int], "cv2.VideoCapture"] = cv2.VideoCapture,
    ) -> None:
        self.description = description
        self.config = config or load_camera_config()
        self._capture_factory = capture_factory
        self.capture = None
        self.paused = False
        self.frames_read = 0

    @property
    def is_open(self) -> bool:
        return self.capture is not None and self.capture.isOpened()

    def open(self) -> None:
        if self.is_open:
            return
        capture = self._capture_factory(self.description.index)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Failed to open {self.description.name}")
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.frame_width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.frame_height)
        self.capture = capture
        self.paused = False
        log.info("Opened %s", self.description.name)

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        if self.paused or not self.is_open:
            return False, None
        ok, frame = self.capture.read()
        if not ok:
            return False, None
        self.frames_read += 1
        return True, frame

    def pause(self) -> None:
        """Release the device while the app is inactive."""
        self.release()
        self.paused = True

    def resume(self) -> None:
        if self.paused:
            self.paused = False
            self.open()

    def release(self) -> None:
        if self.capture is not None:
            self.capture.release()
            self.capture = None
            log.info("Released %s", self.description.name)


__all__ = ["CameraDescription", "CameraError", "CameraManager", "enumerate_cameras"]
