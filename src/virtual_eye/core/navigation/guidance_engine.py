"""Scene analysis: turns one frame's detected objects into spoken guidance."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from virtual_eye.core.telemetry.loggers.navigation_logger import get_navigation_logger
from virtual_eye.core.vision.detected_object import (
    DetectedObject,
    Direction,
    ObjectType,
    Priority,
)
from virtual_eye.core.vision.object_classifier import normalize_label
from virtual_eye.utils.config_sections import GuidanceConfig, load_guidance_config

DIRECTION_PHRASES: Mapping[Direction, str] = MappingProxyType({
    Direction.FAR_LEFT: "far to your left",
    Direction.LEFT: "to your left",
    Direction.CENTER: "directly ahead",
    Direction.RIGHT: "to your right",
    Direction.FAR_RIGHT: "far to your right",
})

INDOOR_VOCABULARY = frozenset({
    "person",
    "bottle",
    "cup",
    "chair",
    "dining table",
    "laptop",
    "tv",
    "book",
    "cell phone",
    "keyboard",
    "mouse",
    "couch",
    "bed",
    "potted plant",
    "clock",
    "vase",
})

VEHICLE_WARNING = "Warning! Vehicle nearby. Do not move."
CAUTION_WARNING = "Caution. Slow down."
EMPTY_SCENE_GUIDANCE = "No objects detected. Point your camera at nearby items."


@dataclass(frozen=True)
class NavigationContext:
    """
    Guidance decided for one cycle.

    Attributes:
        objects: Every object considered, in input order
        guidance: Sentence to show and speak
        is_safe_to_move: False only when a critical object is present
        warning: Urgent prefix to speak first, empty when none applies
        timestamp: Analysis time (seconds since epoch)
    """
    objects: Tuple[DetectedObject, ...]
    guidance: str
    is_safe_to_move: bool
    warning: str
    timestamp: float

    @property
    def has_warning(self) -> bool:
        return bool(self.warning)


def direction_phrase(direction: Direction) -> str:
    return DIRECTION_PHRASES[direction]


def _first_preferred(
    candidates: Sequence[DetectedObject],
    preferred_type: ObjectType,
) -> DetectedObject:
    for obj in candidates:
        if obj.type == preferred_type:
            return obj
    return candidates[0]


class GuidanceEngine:
    """Priority-tiered decision cascade over a frame's detected objects.

    Tiers are evaluated in order and the first match wins:
    critical (stop), high (caution), indoor context, then the empty-scene
    prompt. With ``announce_unclassified`` enabled, objects that match no
    tier are listed generically before falling back to the empty prompt.
    """

    def __init__(
        self,
        config: Optional[GuidanceConfig] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or load_guidance_config()
        self._clock = clock

    def analyze(
        self,
        objects: Sequence[DetectedObject],
        now: Optional[float] = None,
    ) -> NavigationContext:
        timestamp = self._clock() if now is None else now
        items = tuple(objects)

        guidance, is_safe, warning, tier = self._decide(items)

        logger = get_navigation_logger().decision
        logger.debug(
            f"tier={tier} objects={len(items)} safe={is_safe} guidance='{guidance}'"
        )

        return NavigationContext(
            objects=items,
            guidance=guidance,
            is_safe_to_move=is_safe,
            warning=warning,
            timestamp=timestamp,
        )

    # ------------------------------------------------------------------
    # tiers
    # ------------------------------------------------------------------

    def _decide(self, items: Tuple[DetectedObject, ...]) -> Tuple[str, bool, str, str]:
        critical = [obj for obj in items if obj.priority == Priority.CRITICAL]
        if critical:
            target = _first_preferred(critical, ObjectType.VEHICLE)
            guidance = (
                f"STOP! {target.label} detected {direction_phrase(target.direction)}. "
                "Wait for it to pass."
            )
            return guidance, False, VEHICLE_WARNING, "critical"

        high = [obj for obj in items if obj.priority == Priority.HIGH]
        if high:
            target = _first_preferred(high, ObjectType.PERSON)
            guidance = (
                f"{target.label} detected {direction_phrase(target.direction)}. "
                "Proceed with caution."
            )
            return guidance, True, CAUTION_WARNING, "high"

        indoor = [obj for obj in items if normalize_label(obj.label) in INDOOR_VOCABULARY]
        if indoor:
            return self._indoor_guidance(indoor), True, "", "indoor"

        if items and self.config.announce_unclassified:
            return self._unclassified_guidance(items), True, "", "unclassified"

        return EMPTY_SCENE_GUIDANCE, True, "", "empty"

    def _indoor_guidance(self, indoor: List[DetectedObject]) -> str:
        counts = Counter(normalize_label(obj.label) for obj in indoor)
        first_seen = {}
        for obj in indoor:
            first_seen.setdefault(normalize_label(obj.label), obj)

        # Counter preserves first-encountered order; sorted() is stable.
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

        label, count = ranked[0]
        label_text = f"{label} ({count} detected)" if count > 1 else label
        guidance = f"{label_text} {direction_phrase(first_seen[label].direction)}."

        others = [name for name, _ in ranked[1:1 + self.config.also_detected_max]]
        if others:
            guidance += f" Also detected: {', '.join(others)}."
        return guidance

    def _unclassified_guidance(self, items: Tuple[DetectedObject, ...]) -> str:
        labels: List[str] = []
        for obj in items:
            if obj.label not in labels:
                labels.append(obj.label)
        return f"I see: {', '.join(labels[: self.config.unclassified_max_labels])}."


__all__ = [
    "CAUTION_WARNING",
    "DIRECTION_PHRASES",
    "EMPTY_SCENE_GUIDANCE",
    "GuidanceEngine",
    "INDOOR_VOCABULARY",
    "NavigationContext",
    "VEHICLE_WARNING",
    "direction_phrase",
]
