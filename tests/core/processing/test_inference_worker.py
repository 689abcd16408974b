"""Unit tests for the inference worker loop."""

from __future__ import annotations

import queue
import threading
from types import SimpleNamespace
from typing import List

import numpy as np
import pytest

import virtual_eye.core.processing.inference_worker as worker_module
from virtual_eye.core.processing.inference_worker import InferenceWorker
from virtual_eye.core.processing.multiproc_types import (
    DetectionsMessage,
    FrameMessage,
    WorkerFailure,
    WorkerReady,
)
from virtual_eye.core.telemetry.loggers import navigation_logger as nav_module
from virtual_eye.core.vision.detected_object import BoundingBox, RawDetection
from virtual_eye.utils.config_sections import WorkerConfig


class StubProcessor:
    def __init__(self, fail_on: tuple = ()) -> None:
        self.runtime_config = SimpleNamespace(model="stub.pt")
        self.device_str = "cpu"
        self.labels = {0: "person", 1: "car"}
        self.fail_on = fail_on
        self.frames: List[np.ndarray] = []

    def process_frame(self, frame: np.ndarray):
        self.frames.append(frame)
        if len(self.frames) in self.fail_on:
            raise RuntimeError("boom")
        return [RawDetection("person", 0.9, BoundingBox(10, 10, 50, 100))]


def make_frame(frame_id: int) -> FrameMessage:
    return FrameMessage(frame_id=frame_id, frame=np.zeros((48, 64, 3), dtype=np.uint8), timestamp=0.0)


def drain(result_queue: queue.Queue) -> list:
    messages = []
    while not result_queue.empty():
        messages.append(result_queue.get_nowait())
    return messages


def run_worker(frames, processor_factory):
    frame_queue: queue.Queue = queue.Queue()
    result_queue: queue.Queue = queue.Queue()
    for frame in frames:
        frame_queue.put(frame)
    frame_queue.put(None)

    worker = InferenceWorker(
        frame_queue,
        result_queue,
        threading.Event(),
        processor_factory=processor_factory,
        config=WorkerConfig(log_every_n_frames=1),
    )
    worker.run_loop()
    return worker, drain(result_queue)


def test_ready_then_detections_per_frame() -> None:
    processor = StubProcessor()

    worker, messages = run_worker([make_frame(1), make_frame(2)], lambda _: processor)

    assert messages[0] == WorkerReady(model="stub.pt", device="cpu", labels=2)
    assert [type(msg) for msg in messages[1:]] == [DetectionsMessage, DetectionsMessage]
    first = messages[1]
    assert first.frame_id == 1
    assert first.image_width == 64
    assert first.image_height == 48
    assert first.detections[0].label == "person"
    assert first.latency_ms >= 0.0
    assert worker.frames_processed == 2
    assert worker.processor is None


def test_frame_failure_is_reported_and_loop_continues() -> None:
    processor = StubProcessor(fail_on=(1,))

    worker, messages = run_worker([make_frame(7), make_frame(8)], lambda _: processor)

    failure = messages[1]
    assert isinstance(failure, WorkerFailure)
    assert failure.frame_id == 7
    assert failure.fatal is False
    assert isinstance(messages[2], DetectionsMessage)
    assert messages[2].frame_id == 8
    assert worker.frames_failed == 1


def test_worker_channel_records_summaries_and_errors(session_logs) -> None:
    processor = StubProcessor(fail_on=(2,))

    run_worker([make_frame(1), make_frame(2)], lambda _: processor)

    content = (session_logs / "inference_worker.log").read_text()
    assert "Classifier ready: model=stub.pt" in content
    assert "Frame 1 - 1 detections" in content
    assert "Inference error on frame 2: boom" in content


def test_process_entry_joins_parent_session(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    nav_module.reset_navigation_logger()
    monkeypatch.setattr(worker_module, "InferenceWorker", lambda *args, **kwargs: SimpleNamespace(run_loop=lambda: None))

    worker_module.inference_worker(queue.Queue(), queue.Queue(), threading.Event(), None, str(tmp_path / "session"))

    nav_logger = nav_module.get_navigation_logger()
    assert nav_logger.channels == ("worker",)
    assert nav_logger.log_dir == tmp_path / "session"
    assert (tmp_path / "session" / "inference_worker.log").exists()
    assert not (tmp_path / "session" / "decision_engine.log").exists()


def test_load_failure_is_fatal() -> None:
    def broken_factory(_):
        raise FileNotFoundError("weights missing")

    _, messages = run_worker([make_frame(1)], broken_factory)

    assert len(messages) == 1
    failure = messages[0]
    assert isinstance(failure, WorkerFailure)
    assert failure.fatal is True
    assert failure.frame_id is None
    assert "weights missing" in failure.reason


def test_stop_event_ends_loop() -> None:
    frame_queue: queue.Queue = queue.Queue()
    result_queue: queue.Queue = queue.Queue()
    stop_event = threading.Event()
    stop_event.set()
    frame_queue.put(make_frame(1))

    worker = InferenceWorker(
        frame_queue,
        result_queue,
        stop_event,
        processor_factory=lambda _: StubProcessor(),
        config=WorkerConfig(),
    )
    worker.run_loop()

    messages = drain(result_queue)
    assert len(messages) == 1
    assert isinstance(messages[0], WorkerReady)
    assert worker.frames_processed == 0


def test_model_path_is_passed_to_factory() -> None:
    seen = []

    def factory(model_path):
        seen.append(model_path)
        return StubProcessor()

    frame_queue: queue.Queue = queue.Queue()
    frame_queue.put(None)
    InferenceWorker(
        frame_queue,
        queue.Queue(),
        threading.Event(),
        model_path="custom.pt",
        processor_factory=factory,
        config=WorkerConfig(),
    ).run_loop()

    assert seen == ["custom.pt"]
