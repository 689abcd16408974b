"""
Detection data model and enrichment.

Components:
- DetectedObject / RawDetection / BoundingBox: detection records
- ObjectType / Priority / Direction: enumerations assigned during enrichment
- enrich_detections: raw classifier output -> DetectedObject list
"""

from .detected_object import (
    BoundingBox,
    DetectedObject,
    Direction,
    ObjectType,
    Priority,
    RawDetection,
)
from .object_classifier import enrich_detection, enrich_detections

__all__ = [
    'BoundingBox',
    'DetectedObject',
    'Direction',
    'ObjectType',
    'Priority',
    'RawDetection',
    'enrich_detection',
    'enrich_detections',
]
