import logging
import queue
import time
from typing import Any, Callable, Optional

from virtual_eye.core.processing.multiproc_types import (
    DetectionsMessage,
    FrameMessage,
    WorkerFailure,
    WorkerReady,
)
from virtual_eye.core.telemetry.loggers.navigation_logger import get_navigation_logger
from virtual_eye.utils.config_sections import WorkerConfig, load_worker_config

log = logging.getLogger("InferenceWorker")


def _default_processor_factory(model_path: Optional[str]):
    from virtual_eye.core.vision.yolo_processor import YoloProcessor

    if model_path:
        return YoloProcessor(model=model_path)
    return YoloProcessor()


class InferenceWorker:
    """Owns the classifier and processes one frame at a time to completion."""

    def __init__(
        self,
        frame_queue,
        result_queue,
        stop_event,
        *,
        model_path: Optional[str] = None,
        processor_factory: Optional[Callable[[Optional[str]], Any]] = None,
        config: Optional[WorkerConfig] = None,
    ):
        self.frame_queue = frame_queue
        self.result_queue = result_queue
        self.stop_event = stop_event
        self.model_path = model_path
        self.processor_factory = processor_factory or _default_processor_factory
        self.config = config or load_worker_config()
        self.processor: Any = None
        self.frames_processed = 0
        self.frames_failed = 0

    def _load_model(self) -> WorkerReady:
        log.info("[InferenceWorker] Loading classifier...")
        self.processor = self.processor_factory(self.model_path)
        runtime = getattr(self.processor, "runtime_config", None)
        labels = getattr(self.processor, "labels", {}) or {}
        return WorkerReady(
            model=str(getattr(runtime, "model", self.model_path or "")),
            device=str(getattr(self.processor, "device_str", "cpu")),
            labels=len(labels),
        )

    def _process_frame(self, msg: FrameMessage) -> DetectionsMessage:
        frame = msg.frame
        start_time = time.perf_counter()
        detections = self.processor.process_frame(frame)
        latency_ms = (time.perf_counter() - start_time) * 1000

        height, width = frame.shape[:2]
        return DetectionsMessage(
            frame_id=msg.frame_id,
            detections=list(detections),
            image_width=int(width),
            image_height=int(height),
            latency_ms=latency_ms,
        )

    def _log_progress(self, result: DetectionsMessage) -> None:
        every = max(1, self.config.log_every_n_frames)
        if self.frames_processed % every:
            return
        top = ", ".join(f"{det.label}: {det.confidence:.2f}" for det in result.detections[:5])
        get_navigation_logger().worker.debug(
            f"Frame {self.frames_processed} - {len(result.detections)} detections "
            f"({result.latency_ms:.1f} ms) | {top or 'none'}"
        )

    def run_loop(self) -> None:
        log.info("[InferenceWorker] Starting run loop")
        try:
            try:
                ready = self._load_model()
            except Exception as err:  # noqa: BLE001
                log.critical("[InferenceWorker] Classifier failed to load", exc_info=err)
                self.result_queue.put(WorkerFailure(reason=f"Failed to load model: {err}", fatal=True))
                return

            get_navigation_logger().worker.info(
                f"Classifier ready: model={ready.model} device={ready.device} labels={ready.labels}"
            )
            self.result_queue.put(ready)

            while not self.stop_event.is_set():
                try:
                    msg = self.frame_queue.get(timeout=0.5)
                except queue.Empty:
                    continue

                if msg is None:
                    break

                try:
                    result = self._process_frame(msg)
                except Exception as err:  # noqa: BLE001
                    self.frames_failed += 1
                    get_navigation_logger().worker.warning(f"Inference error on frame {msg.frame_id}: {err}")
                    self.result_queue.put(
                        WorkerFailure(reason=f"Inference error: {err}", frame_id=msg.frame_id)
                    )
                    continue

                self.frames_processed += 1
                self._log_progress(result)
                self.result_queue.put(result)
        finally:
            self.processor = None
            log.info("[InferenceWorker] Shutdown complete")


def inference_worker(
    frame_queue,
    result_queue,
    stop_event,
    model_path: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> None:
    """Process entry point. Joins the parent's log session when log_dir is given."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    get_navigation_logger(session_dir=log_dir, channels=("worker",), file_mode="a")
    InferenceWorker(frame_queue, result_queue, stop_event, model_path=model_path).run_loop()
