"""Enrichment of raw classifier detections into DetectedObject records."""

from __future__ import annotations

import time
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from .detected_object import (
    BoundingBox,
    DetectedObject,
    Direction,
    ObjectType,
    Priority,
    RawDetection,
)

OBJECT_TYPES: Mapping[str, ObjectType] = MappingProxyType({
    "person": ObjectType.PERSON,
    "car": ObjectType.VEHICLE,
    "bus": ObjectType.VEHICLE,
    "truck": ObjectType.VEHICLE,
    "bicycle": ObjectType.VEHICLE,
    "motorcycle": ObjectType.VEHICLE,
    "train": ObjectType.VEHICLE,
    "chair": ObjectType.FURNITURE,
    "couch": ObjectType.FURNITURE,
    "bed": ObjectType.FURNITURE,
    "dining table": ObjectType.FURNITURE,
    "bench": ObjectType.FURNITURE,
    "tv": ObjectType.ELECTRONIC,
    "laptop": ObjectType.ELECTRONIC,
    "cell phone": ObjectType.ELECTRONIC,
    "keyboard": ObjectType.ELECTRONIC,
    "mouse": ObjectType.ELECTRONIC,
    "bottle": ObjectType.FOOD,
    "cup": ObjectType.FOOD,
    "bowl": ObjectType.FOOD,
    "traffic light": ObjectType.LANDMARK,
    "stop sign": ObjectType.LANDMARK,
    "clock": ObjectType.LANDMARK,
    "fire hydrant": ObjectType.OBSTACLE,
    "potted plant": ObjectType.OBSTACLE,
    "suitcase": ObjectType.OBSTACLE,
})

OBJECT_PRIORITIES: Mapping[str, Priority] = MappingProxyType({
    "car": Priority.CRITICAL,
    "bus": Priority.CRITICAL,
    "truck": Priority.CRITICAL,
    "bicycle": Priority.CRITICAL,
    "motorcycle": Priority.CRITICAL,
    "train": Priority.CRITICAL,
    "person": Priority.HIGH,
    "chair": Priority.MEDIUM,
    "couch": Priority.MEDIUM,
    "bed": Priority.MEDIUM,
    "dining table": Priority.MEDIUM,
    "bench": Priority.MEDIUM,
    "fire hydrant": Priority.MEDIUM,
    "potted plant": Priority.MEDIUM,
    "suitcase": Priority.MEDIUM,
    "stop sign": Priority.MEDIUM,
    "traffic light": Priority.MEDIUM,
})

# Upper edges of the far_left..right bins; anything above the last is far_right.
_DIRECTION_EDGES = (
    (0.2, Direction.FAR_LEFT),
    (0.4, Direction.LEFT),
    (0.6, Direction.CENTER),
    (0.8, Direction.RIGHT),
)

DEFAULT_DIRECTION = Direction.CENTER
DEFAULT_DISTANCE = 0.5


def normalize_label(label: str) -> str:
    return str(label or "").strip().lower()


def classify_type(label: str) -> ObjectType:
    return OBJECT_TYPES.get(normalize_label(label), ObjectType.OTHER)


def classify_priority(label: str) -> Priority:
    return OBJECT_PRIORITIES.get(normalize_label(label), Priority.LOW)


def compute_direction(center_x: float, image_width: float) -> Direction:
    """
    Map a horizontal centre to one of five equal-width bins.

    Comparisons are strict, so a ratio sitting exactly on an edge falls in
    the bin to its right: 0.2 is left, 0.4 is center, 0.8 is far_right.
    A non-positive width yields the default direction.
    """
    if image_width <= 0:
        return DEFAULT_DIRECTION

    ratio = min(max(center_x / image_width, 0.0), 1.0)
    for edge, direction in _DIRECTION_EDGES:
        if ratio < edge:
            return direction
    return Direction.FAR_RIGHT


def estimate_distance(confidence: float, box_area: float) -> float:
    """
    Heuristic closeness in [0, 1]; 0 is very close, 1 is far.

    Higher confidence and a larger normalized box area both pull the value
    toward 0. This is a proxy for ordering objects, not a metric distance.
    """
    confidence_term = 1.0 - min(max(confidence, 0.0), 1.0)
    area_term = 1.0 - min(max(box_area, 0.0), 1.0)
    return (confidence_term + area_term) / 2


def normalized_box_area(
    bbox: BoundingBox,
    image_width: float,
    image_height: Optional[float] = None,
) -> float:
    """Box area as a fraction of the image; uses width² when the height is unknown."""
    if image_width <= 0:
        return 0.0
    frame_area = image_width * (image_height if image_height and image_height > 0 else image_width)
    return bbox.area / frame_area


def enrich_detection(
    raw: RawDetection,
    image_width: float,
    image_height: Optional[float] = None,
    now: Optional[float] = None,
) -> DetectedObject:
    timestamp = time.time() if now is None else now

    if raw.bbox is None:
        direction = DEFAULT_DIRECTION
        distance = DEFAULT_DISTANCE
    else:
        direction = compute_direction(raw.bbox.center_x, image_width)
        distance = estimate_distance(
            raw.confidence,
            normalized_box_area(raw.bbox, image_width, image_height),
        )

    return DetectedObject(
        label=raw.label,
        confidence=float(raw.confidence),
        type=classify_type(raw.label),
        priority=classify_priority(raw.label),
        direction=direction,
        distance=distance,
        timestamp=timestamp,
        bounding_box=raw.bbox,
    )


def enrich_detections(
    raws: Iterable[RawDetection],
    image_width: float,
    image_height: Optional[float] = None,
    now: Optional[float] = None,
) -> List[DetectedObject]:
    """Enrich a frame's detections, keeping their order and sharing one timestamp."""
    timestamp = time.time() if now is None else now
    return [enrich_detection(raw, image_width, image_height, now=timestamp) for raw in raws]


__all__ = [
    "OBJECT_PRIORITIES",
    "OBJECT_TYPES",
    "classify_priority",
    "classify_type",
    "compute_direction",
    "enrich_detection",
    "enrich_detections",
    "estimate_distance",
    "normalize_label",
    "normalized_box_area",
]
