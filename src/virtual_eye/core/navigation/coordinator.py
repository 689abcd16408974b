"""
Navigation Coordinator - capture/UI side of Virtual Eye.

Orchestrates data flow between frame capture, the inference worker, the
guidance engine and the audio/status outputs. It owns the only mutable
per-session state (the announcer's last spoken context, the status line)
and is driven from a single thread.

Pipeline Flow:
    Frame → FrameGate → Worker (YOLO) → Enrichment → GuidanceEngine →
    GuidanceAnnouncer (speech) + StatusView (display)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from virtual_eye.core.navigation.guidance_engine import GuidanceEngine, NavigationContext
from virtual_eye.core.processing.frame_gate import FrameGate
from virtual_eye.core.processing.multiproc_types import (
    DetectionsMessage,
    WorkerFailure,
    WorkerMessage,
    WorkerReady,
)
from virtual_eye.core.telemetry.loggers.navigation_logger import get_navigation_logger
from virtual_eye.core.vision.detected_object import DetectedObject, RawDetection
from virtual_eye.core.vision.object_classifier import enrich_detections

INITIALIZING_TEXT = "Initializing..."
READY_TEXT = "Point at your surroundings..."


@dataclass(frozen=True)
class StatusView:
    """What the status band shows: text plus a severity level for colouring."""

    text: str
    level: str = "info"  # danger | caution | clear | info


def status_for_context(context: NavigationContext) -> StatusView:
    if not context.is_safe_to_move:
        return StatusView(text=context.guidance, level="danger")
    if context.warning:
        return StatusView(text=context.guidance, level="caution")
    return StatusView(text=context.guidance, level="clear")


class Coordinator:
    """
    Drives one guidance cycle per worker result.

    Dependencies are injected (see Builder); the coordinator does not create
    subsystems.

    Attributes:
        worker: WorkerHandle-like object with submit()/poll()/stop()
        engine: GuidanceEngine
        announcer: Optional GuidanceAnnouncer (None when audio is disabled)
        audio_system: Optional AudioSystem for system notices
        frame_gate: FrameGate for drop-based submission
    """

    def __init__(
        self,
        worker,
        engine: Optional[GuidanceEngine] = None,
        *,
        announcer=None,
        audio_system=None,
        frame_gate: Optional[FrameGate] = None,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.worker = worker
        self.engine = engine or GuidanceEngine()
        self.announcer = announcer
        self.audio_system = audio_system
        self.frame_gate = frame_gate or FrameGate()
        self._clock = clock
        self._monotonic = monotonic

        self.worker_ready = False
        self.worker_failed = False
        self.status = StatusView(INITIALIZING_TEXT)
        self.latest_context: Optional[NavigationContext] = None
        self.latest_objects: List[DetectedObject] = []

        self._frame_id = 0
        self._last_dims = (0, 0)
        self.frames_seen = 0
        self.frames_not_ready = 0
        self.frames_rejected = 0
        self.cycles = 0
        self.failures = 0

    # ------------------------------------------------------------------
    # capture side
    # ------------------------------------------------------------------

    def on_frame(self, frame: np.ndarray) -> bool:
        """Offer a camera frame to the worker. Returns True if it was submitted."""
        self.frames_seen += 1
        if not self.worker_ready or self.worker_failed:
            self.frames_not_ready += 1
            return False

        if not self.frame_gate.try_acquire(self._monotonic()):
            return False

        self._frame_id += 1
        if not self.worker.submit(self._frame_id, frame, self._clock()):
            self.frames_rejected += 1
            self.frame_gate.release()
            return False
        return True

    def process_worker_messages(self) -> Optional[NavigationContext]:
        """Handle everything the worker has posted; returns the newest context, if any."""
        latest = None
        for message in self.worker.poll():
            context = self.handle_message(message)
            if context is not None:
                latest = context
        return latest

    def handle_message(self, message: WorkerMessage) -> Optional[NavigationContext]:
        logger = get_navigation_logger().capture

        if isinstance(message, WorkerReady):
            self.worker_ready = True
            logger.info(f"Worker ready: model={message.model} device={message.device} labels={message.labels}")
            self.status = StatusView(READY_TEXT)
            return None

        if isinstance(message, DetectionsMessage):
            self.frame_gate.release()
            self._last_dims = (message.image_width, message.image_height)
            logger.debug(
                f"Frame {message.frame_id}: {len(message.detections)} detections in {message.latency_ms:.1f} ms"
            )
            return self.handle_detections(
                message.detections,
                message.image_width,
                message.image_height,
            )

        if isinstance(message, WorkerFailure):
            self.failures += 1
            self.frame_gate.release()
            if message.fatal:
                self.worker_failed = True
                logger.error(f"Worker failed: {message.reason}")
                self.notify(message.reason, speech="Failed to load model")
                return None
            logger.warning(f"Frame {message.frame_id} failed: {message.reason}")
            width, height = self._last_dims
            return self.handle_detections([], width, height)

        raise TypeError(f"Unexpected worker message: {type(message).__name__}")

    # ------------------------------------------------------------------
    # guidance cycle
    # ------------------------------------------------------------------

    def handle_detections(
        self,
        detections: Sequence[RawDetection],
        image_width: float,
        image_height: Optional[float] = None,
    ) -> NavigationContext:
        """Run one full cycle: enrich, analyze, update status and announce."""
        now = self._clock()
        objects = enrich_detections(detections, image_width, image_height, now=now)
        context = self.engine.analyze(objects, now=now)

        self.latest_objects = objects
        self.latest_context = context
        self.status = status_for_context(context)
        self.cycles += 1

        if self.announcer is not None:
            self.announcer.announce(context)
        return context

    def notify(self, text: str, *, speech: Optional[str] = None) -> None:
        """Show a system notice and speak it (or its short form)."""
        self.status = StatusView(text=text, level="info")
        if self.audio_system is not None:
            self.audio_system.speak(speech or text)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        if self.announcer is not None:
            self.announcer.close()
        self.worker.stop()
        self.frame_gate.reset()
        if self.audio_system is not None:
            self.audio_system.close()

    def get_debug_info(self) -> dict:
        return {
            "worker_ready": self.worker_ready,
            "worker_failed": self.worker_failed,
            "in_flight": self.frame_gate.in_flight,
            "frames_seen": self.frames_seen,
            "frames_dropped": self.frame_gate.dropped_frames,
            "frames_submitted": self.frame_gate.submitted_frames,
            "cycles": self.cycles,
            "failures": self.failures,
            "last_spoken": (
                self.announcer.last_context.guidance
                if self.announcer is not None and self.announcer.last_context is not None
                else ""
            ),
        }


__all__ = ["Coordinator", "StatusView", "status_for_context"]
