"""Tests for detection enrichment."""

from __future__ import annotations

import pytest

from virtual_eye.core.vision import object_classifier as classifier
from virtual_eye.core.vision.detected_object import (
    BoundingBox,
    Direction,
    ObjectType,
    Priority,
    RawDetection,
)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("person", ObjectType.PERSON),
        ("car", ObjectType.VEHICLE),
        ("train", ObjectType.VEHICLE),
        ("dining table", ObjectType.FURNITURE),
        ("laptop", ObjectType.ELECTRONIC),
        ("cup", ObjectType.FOOD),
        ("stop sign", ObjectType.LANDMARK),
        ("suitcase", ObjectType.OBSTACLE),
        ("giraffe", ObjectType.OTHER),
        ("", ObjectType.OTHER),
    ],
)
def test_classify_type(label: str, expected: ObjectType) -> None:
    assert classifier.classify_type(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("car", Priority.CRITICAL),
        ("motorcycle", Priority.CRITICAL),
        ("person", Priority.HIGH),
        ("chair", Priority.MEDIUM),
        ("traffic light", Priority.MEDIUM),
        ("bottle", Priority.LOW),
        ("giraffe", Priority.LOW),
    ],
)
def test_classify_priority(label: str, expected: Priority) -> None:
    assert classifier.classify_priority(label) == expected


def test_label_lookup_ignores_case_and_whitespace() -> None:
    assert classifier.classify_type("  Car ") == ObjectType.VEHICLE
    assert classifier.classify_priority("PERSON") == Priority.HIGH


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        classifier.OBJECT_TYPES["dog"] = ObjectType.OTHER  # type: ignore[index]


@pytest.mark.parametrize(
    "center_x, expected",
    [
        (0, Direction.FAR_LEFT),
        (100, Direction.FAR_LEFT),
        (199.9, Direction.FAR_LEFT),
        (200, Direction.LEFT),
        (399, Direction.LEFT),
        (400, Direction.CENTER),
        (500, Direction.CENTER),
        (600, Direction.RIGHT),
        (799, Direction.RIGHT),
        (800, Direction.FAR_RIGHT),
        (1000, Direction.FAR_RIGHT),
    ],
)
def test_compute_direction_bins(center_x: float, expected: Direction) -> None:
    assert classifier.compute_direction(center_x, 1000) == expected


def test_compute_direction_clamps_out_of_frame_centres() -> None:
    assert classifier.compute_direction(-50, 640) == Direction.FAR_LEFT
    assert classifier.compute_direction(900, 640) == Direction.FAR_RIGHT


def test_compute_direction_without_width_is_default() -> None:
    assert classifier.compute_direction(100, 0) == Direction.CENTER
    assert classifier.compute_direction(100, -1) == Direction.CENTER


def test_estimate_distance_bounds() -> None:
    assert classifier.estimate_distance(1.0, 1.0) == pytest.approx(0.0)
    assert classifier.estimate_distance(0.0, 0.0) == pytest.approx(1.0)
    assert classifier.estimate_distance(2.0, 5.0) == pytest.approx(0.0)
    assert classifier.estimate_distance(-1.0, -1.0) == pytest.approx(1.0)


def test_estimate_distance_closer_for_bigger_and_surer_boxes() -> None:
    far = classifier.estimate_distance(0.4, 0.05)
    near = classifier.estimate_distance(0.9, 0.5)
    assert 0.0 <= near < far <= 1.0


def test_normalized_box_area_uses_width_squared_without_height() -> None:
    bbox = BoundingBox(0, 0, 10, 10)
    assert classifier.normalized_box_area(bbox, 100) == pytest.approx(0.01)
    assert classifier.normalized_box_area(bbox, 100, 50) == pytest.approx(0.02)
    assert classifier.normalized_box_area(bbox, 0) == 0.0


def test_enrich_detection_with_bbox() -> None:
    raw = RawDetection("car", 0.8, BoundingBox(0, 0, 100, 100))

    obj = classifier.enrich_detection(raw, 640, 480, now=12.5)

    assert obj.label == "car"
    assert obj.confidence == pytest.approx(0.8)
    assert obj.type == ObjectType.VEHICLE
    assert obj.priority == Priority.CRITICAL
    assert obj.direction == Direction.FAR_LEFT
    assert 0.0 <= obj.distance <= 1.0
    assert obj.timestamp == 12.5
    assert obj.bounding_box == raw.bbox


def test_enrich_detection_without_bbox_uses_defaults() -> None:
    obj = classifier.enrich_detection(RawDetection("bottle", 0.6), 640, now=1.0)

    assert obj.direction == Direction.CENTER
    assert obj.distance == pytest.approx(0.5)
    assert obj.bounding_box is None


def test_enrich_detections_keeps_order_and_shares_timestamp(monkeypatch: pytest.MonkeyPatch) -> None:
    ticks = iter([100.0, 200.0, 300.0])
    monkeypatch.setattr(classifier.time, "time", lambda: next(ticks))
    raws = [
        RawDetection("person", 0.9, BoundingBox(500, 0, 600, 100)),
        RawDetection("chair", 0.5, BoundingBox(0, 0, 50, 50)),
        RawDetection("zebra", 0.4),
    ]

    objects = classifier.enrich_detections(raws, 640, 480)

    assert [obj.label for obj in objects] == ["person", "chair", "zebra"]
    assert {obj.timestamp for obj in objects} == {100.0}
    assert objects[2].type == ObjectType.OTHER


def test_enrich_detections_empty() -> None:
    assert classifier.enrich_detections([], 640) == []
