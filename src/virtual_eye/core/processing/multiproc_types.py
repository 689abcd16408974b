"""
Message types for the capture <-> inference worker channel.

Frames go to the worker as FrameMessage. Everything coming back is one
WorkerMessage variant, so the receiver dispatches on type instead of
sniffing payloads:

- WorkerReady: model loaded, frames may be submitted
- DetectionsMessage: raw detections for one frame
- WorkerFailure: a frame failed (non-fatal) or the worker is exiting (fatal)

Usage:
    frame_msg = FrameMessage(frame_id=42, frame=frame_array, timestamp=time.time())

    message = result_queue.get_nowait()
    if isinstance(message, DetectionsMessage):
        objects = enrich_detections(message.detections, message.image_width, message.image_height)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np

from virtual_eye.core.vision.detected_object import RawDetection


@dataclass
class FrameMessage:
    """
    Input frame sent to the worker process.

    Attributes:
        frame_id: Unique frame identifier
        frame: BGR frame array
        timestamp: Frame capture timestamp
    """
    frame_id: int
    frame: np.ndarray
    timestamp: float


@dataclass(frozen=True)
class WorkerReady:
    """Posted once after the classifier has loaded."""

    model: str
    device: str = "cpu"
    labels: int = 0


@dataclass(frozen=True)
class DetectionsMessage:
    """
    Detection result for one frame.

    Attributes:
        frame_id: Matching frame identifier
        detections: Raw classifier outputs, ranked
        image_width: Source frame width in pixels
        image_height: Source frame height in pixels
        latency_ms: Inference latency in milliseconds
    """
    frame_id: int
    detections: List[RawDetection] = field(default_factory=list)
    image_width: int = 0
    image_height: int = 0
    latency_ms: float = 0.0


@dataclass(frozen=True)
class WorkerFailure:
    """
    Inference or startup failure.

    Attributes:
        reason: Human-readable description
        frame_id: Frame that failed, None for startup failures
        fatal: True when the worker has stopped processing
    """
    reason: str
    frame_id: Optional[int] = None
    fatal: bool = False


WorkerMessage = Union[WorkerReady, DetectionsMessage, WorkerFailure]


__all__ = [
    "DetectionsMessage",
    "FrameMessage",
    "WorkerFailure",
    "WorkerMessage",
    "WorkerReady",
]
