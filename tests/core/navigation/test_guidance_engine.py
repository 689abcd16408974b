"""Tests for the scene-analysis cascade."""

from __future__ import annotations

import itertools

import pytest

from virtual_eye.core.navigation.guidance_engine import (
    CAUTION_WARNING,
    DIRECTION_PHRASES,
    EMPTY_SCENE_GUIDANCE,
    VEHICLE_WARNING,
    GuidanceEngine,
)
from virtual_eye.core.vision.detected_object import DetectedObject, Direction, Priority
from virtual_eye.core.vision.object_classifier import classify_priority, classify_type
from virtual_eye.utils.config_sections import GuidanceConfig


def make_object(label: str, direction: Direction = Direction.CENTER, confidence: float = 0.8) -> DetectedObject:
    return DetectedObject(
        label=label,
        confidence=confidence,
        type=classify_type(label),
        priority=classify_priority(label),
        direction=direction,
        distance=0.5,
        timestamp=0.0,
    )


@pytest.fixture()
def engine() -> GuidanceEngine:
    return GuidanceEngine(GuidanceConfig(), clock=lambda: 42.0)


def test_every_direction_has_a_phrase() -> None:
    assert set(DIRECTION_PHRASES) == set(Direction)


def test_empty_scene(engine: GuidanceEngine) -> None:
    context = engine.analyze([])

    assert context.guidance == EMPTY_SCENE_GUIDANCE
    assert context.is_safe_to_move is True
    assert context.warning == ""
    assert context.has_warning is False
    assert context.objects == ()
    assert context.timestamp == 42.0


def test_vehicle_stops_the_user(engine: GuidanceEngine) -> None:
    context = engine.analyze([make_object("car", Direction.LEFT)])

    assert context.guidance == "STOP! car detected to your left. Wait for it to pass."
    assert context.is_safe_to_move is False
    assert context.warning == VEHICLE_WARNING


def test_critical_beats_high_and_indoor(engine: GuidanceEngine) -> None:
    objects = [
        make_object("person", Direction.RIGHT),
        make_object("chair"),
        make_object("bus", Direction.FAR_RIGHT),
    ]

    context = engine.analyze(objects)

    assert context.guidance == "STOP! bus detected far to your right. Wait for it to pass."
    assert context.is_safe_to_move is False


def test_first_critical_object_in_input_order_wins(engine: GuidanceEngine) -> None:
    objects = [make_object("bicycle", Direction.RIGHT), make_object("truck", Direction.LEFT)]

    context = engine.analyze(objects)

    assert context.guidance.startswith("STOP! bicycle detected to your right.")


def test_person_asks_for_caution(engine: GuidanceEngine) -> None:
    context = engine.analyze([make_object("chair"), make_object("person", Direction.RIGHT)])

    assert context.guidance == "person detected to your right. Proceed with caution."
    assert context.is_safe_to_move is True
    assert context.warning == CAUTION_WARNING


def test_indoor_counts_and_also_detected(engine: GuidanceEngine) -> None:
    objects = [
        make_object("chair", Direction.LEFT),
        make_object("chair", Direction.RIGHT),
        make_object("bottle"),
    ]

    context = engine.analyze(objects)

    assert context.guidance == "chair (2 detected) to your left. Also detected: bottle."
    assert context.is_safe_to_move is True
    assert context.warning == ""


def test_indoor_single_label_has_no_trailing_list(engine: GuidanceEngine) -> None:
    context = engine.analyze([make_object("laptop", Direction.FAR_LEFT)])

    assert context.guidance == "laptop far to your left."


def test_indoor_ties_keep_first_seen_order(engine: GuidanceEngine) -> None:
    context = engine.analyze([make_object("cup"), make_object("bottle"), make_object("tv")])

    assert context.guidance == "cup directly ahead. Also detected: bottle, tv."


def test_indoor_also_detected_is_capped(engine: GuidanceEngine) -> None:
    objects = [make_object(label) for label in ("book", "cup", "vase", "clock", "mouse")]

    context = engine.analyze(objects)

    assert context.guidance == "book directly ahead. Also detected: cup, vase."


def test_indoor_ignores_labels_outside_vocabulary(engine: GuidanceEngine) -> None:
    context = engine.analyze([make_object("giraffe"), make_object("vase", Direction.RIGHT)])

    assert context.guidance == "vase to your right."
    assert len(context.objects) == 2


def test_indoor_labels_match_regardless_of_case(engine: GuidanceEngine) -> None:
    objects = [make_object("Chair", Direction.LEFT), make_object(" chair "), make_object("CUP")]

    context = engine.analyze(objects)

    assert context.guidance == "chair (2 detected) to your left. Also detected: cup."


def test_unclassified_objects_fall_through_to_empty_prompt(engine: GuidanceEngine) -> None:
    context = engine.analyze([make_object("giraffe"), make_object("bench")])

    assert context.guidance == EMPTY_SCENE_GUIDANCE
    assert context.is_safe_to_move is True
    assert len(context.objects) == 2


def test_unclassified_objects_listed_when_enabled() -> None:
    engine = GuidanceEngine(GuidanceConfig(announce_unclassified=True), clock=lambda: 0.0)
    objects = [make_object(label) for label in ("giraffe", "bench", "giraffe", "kite", "sink")]

    context = engine.analyze(objects)

    assert context.guidance == "I see: giraffe, bench, kite."
    assert context.is_safe_to_move is True


def test_unclassified_tier_never_replaces_indoor() -> None:
    engine = GuidanceEngine(GuidanceConfig(announce_unclassified=True), clock=lambda: 0.0)

    context = engine.analyze([make_object("giraffe"), make_object("cup")])

    assert context.guidance == "cup directly ahead."


def test_explicit_timestamp_overrides_clock(engine: GuidanceEngine) -> None:
    assert engine.analyze([], now=7.0).timestamp == 7.0


def test_decisions_are_logged(engine: GuidanceEngine, session_logs) -> None:
    engine.analyze([make_object("car")])

    content = (session_logs / "decision_engine.log").read_text()
    assert "tier=critical" in content


@pytest.mark.parametrize(
    "labels",
    list(itertools.product(["car", "person", "chair", "giraffe", "cup"], repeat=2)),
)
def test_unsafe_exactly_when_critical_present(engine: GuidanceEngine, labels) -> None:
    objects = [make_object(label) for label in labels]

    context = engine.analyze(objects)

    has_critical = any(obj.priority == Priority.CRITICAL for obj in objects)
    assert context.is_safe_to_move is (not has_critical)
    assert context.guidance
    assert context.objects == tuple(objects)
