"""
Detection data structures shared by the classifier, the worker and the guidance engine.

This module defines:
- ObjectType / Priority / Direction: closed enumerations assigned during enrichment
- BoundingBox: pixel rectangle in source-image coordinates
- RawDetection: one classifier output (label, confidence, optional box)
- DetectedObject: a detection enriched with type, priority, direction and distance

Usage:
    raw = RawDetection(label="chair", confidence=0.82, bbox=BoundingBox(40, 120, 200, 380))
    obj = DetectedObject(
        label="chair",
        confidence=0.82,
        type=ObjectType.FURNITURE,
        priority=Priority.MEDIUM,
        direction=Direction.LEFT,
        distance=0.31,
        timestamp=time.time(),
        bounding_box=raw.bbox,
    )
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ObjectType(Enum):
    OBSTACLE = "obstacle"
    LANDMARK = "landmark"
    PERSON = "person"
    VEHICLE = "vehicle"
    FURNITURE = "furniture"
    FOOD = "food"
    ELECTRONIC = "electronic"
    OTHER = "other"


class Priority(Enum):
    """Urgency of an object, most urgent first."""

    CRITICAL = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4


class Direction(Enum):
    """Horizontal position, ordered left to right."""

    FAR_LEFT = 0
    LEFT = 1
    CENTER = 2
    RIGHT = 3
    FAR_RIGHT = 4


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box (x1, y1, x2, y2) in pixels."""

    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def width(self) -> float:
        return max(0.0, self.x2 - self.x1)

    @property
    def height(self) -> float:
        return max(0.0, self.y2 - self.y1)

    @property
    def center_x(self) -> float:
        return (self.x1 + self.x2) / 2

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class RawDetection:
    """
    One classifier output.

    Attributes:
        label: Class name from the model's label list (e.g., "person")
        confidence: Detection score (0-1)
        bbox: Box in source-image pixels, None when the model gives no geometry
    """
    label: str
    confidence: float
    bbox: Optional[BoundingBox] = None


@dataclass(frozen=True)
class DetectedObject:
    """
    A detection enriched for guidance.

    Attributes:
        label: Class name (e.g., "person", "chair", "car")
        confidence: Detection confidence score (0-1)
        type: ObjectType from the label table
        priority: Priority from the label table
        direction: Horizontal direction bin of the box centre
        distance: Heuristic closeness (0 = very close, 1 = far); not metric
        timestamp: Creation time (seconds since epoch)
        bounding_box: Source box, None in degraded mode
    """
    label: str
    confidence: float
    type: ObjectType
    priority: Priority
    direction: Direction
    distance: float
    timestamp: float
    bounding_box: Optional[BoundingBox] = None


__all__ = [
    "BoundingBox",
    "DetectedObject",
    "Direction",
    "ObjectType",
    "Priority",
    "RawDetection",
]
