"""
Spawns the inference worker process and exposes a non-blocking handle to it.

The worker owns the model; the capture side only submits frames and drains
typed result messages. Spawn start method keeps torch state out of the parent.
"""

from __future__ import annotations

import logging
import multiprocessing as mp
import queue
from typing import Any, Callable, List, Optional

import numpy as np

from virtual_eye.core.processing.inference_worker import inference_worker
from virtual_eye.core.processing.multiproc_types import FrameMessage, WorkerMessage
from virtual_eye.core.telemetry.loggers.navigation_logger import get_navigation_logger
from virtual_eye.utils.config_sections import WorkerConfig, load_worker_config

log = logging.getLogger("WorkerLauncher")


class WorkerHandle:
    """Capture-side handle on the inference worker process."""

    def __init__(
        self,
        model_path: Optional[str] = None,
        *,
        config: Optional[WorkerConfig] = None,
        context: Optional[Any] = None,
        target: Callable[..., None] = inference_worker,
    ) -> None:
        self.model_path = model_path
        self.config = config or load_worker_config()
        self._ctx = context or mp.get_context("spawn")
        self._target = target
        self.frame_queue = self._ctx.Queue(maxsize=max(1, self.config.queue_size))
        self.result_queue = self._ctx.Queue(maxsize=max(1, self.config.result_queue_size))
        self.stop_event = self._ctx.Event()
        self.process = None

    @property
    def is_alive(self) -> bool:
        return self.process is not None and self.process.is_alive()

    def start(self) -> None:
        if self.process is not None:
            return
        self.process = self._ctx.Process(
            target=self._target,
            args=(
                self.frame_queue,
                self.result_queue,
                self.stop_event,
                self.model_path,
                str(get_navigation_logger().log_dir),
            ),
            name="InferenceWorker",
            daemon=True,
        )
        self.process.start()
        log.info("Inference worker started (pid=%s)", self.process.pid)

    def submit(self, frame_id: int, frame: np.ndarray, timestamp: float) -> bool:
        """Hand a frame to the worker without blocking. False if it was not accepted."""
        try:
            self.frame_queue.put_nowait(FrameMessage(frame_id=frame_id, frame=frame, timestamp=timestamp))
        except queue.Full:
            return False
        return True

    def poll(self) -> List[WorkerMessage]:
        """Drain every result currently available."""
        messages: List[WorkerMessage] = []
        while True:
            try:
                messages.append(self.result_queue.get_nowait())
            except queue.Empty:
                return messages

    def stop(self) -> None:
        if self.process is None:
            return
        self.stop_event.set()
        try:
            self.frame_queue.put_nowait(None)
        except queue.Full:
            pass
        self.process.join(timeout=self.config.join_timeout)
        if self.process.is_alive():
            log.warning("Inference worker did not exit in %.1fs, terminating", self.config.join_timeout)
            self.process.terminate()
            self.process.join(timeout=1.0)
        self.process = None
        log.info("Inference worker stopped")


__all__ = ["WorkerHandle"]
