import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import numpy as np
import torch
from ultralytics import YOLO

from virtual_eye.utils.config_sections import load_yolo_config
from .detected_object import BoundingBox, RawDetection

log = logging.getLogger("YoloProcessor")


@dataclass(frozen=True)
class YoloRuntimeConfig:
    """Runtime configuration for a YOLO processor instance."""

    model: str
    device: str
    confidence: float
    image_size: int
    max_detections: int
    iou_threshold: float
    ranking: Dict[str, int] = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_defaults(cls) -> "YoloRuntimeConfig":
        section = load_yolo_config()
        return cls(
            model=section.model,
            device=section.device,
            confidence=section.confidence,
            image_size=section.image_size,
            max_detections=section.max_detections,
            iou_threshold=section.iou_threshold,
            ranking=dict(section.ranking),
        )

    def with_overrides(self, **overrides) -> "YoloRuntimeConfig":
        mapped = {}
        for key, value in overrides.items():
            if key in {"imgsz", "image_size"}:
                mapped["image_size"] = int(value)
            elif key in {"max_det", "max_detections"}:
                mapped["max_detections"] = int(value)
            elif key in {"conf", "confidence"}:
                mapped["confidence"] = float(value)
            elif key in {"iou", "iou_threshold"}:
                mapped["iou_threshold"] = float(value)
            elif key == "device":
                mapped["device"] = str(value)
            elif key in {"model", "weights"}:
                mapped["model"] = str(value)
            elif key == "ranking":
                mapped["ranking"] = dict(value)
            else:
                raise ValueError(f"Unsupported YOLO override '{key}'")

        data = asdict(self)
        data.update(mapped)
        return YoloRuntimeConfig(**data)


class YoloProcessor:
    """YOLO-based classifier producing ranked RawDetection lists."""

    def __init__(
        self,
        runtime_config: Optional[YoloRuntimeConfig] = None,
        **overrides,
    ) -> None:
        if runtime_config is not None and overrides:
            raise ValueError("Provide either runtime_config or overrides, not both")

        if runtime_config is None:
            base = YoloRuntimeConfig.from_defaults()
            self.runtime_config = base.with_overrides(**overrides) if overrides else base
        else:
            self.runtime_config = runtime_config

        log.info(
            "Init model=%s device=%s imgsz=%s conf=%s iou=%s max_det=%s",
            self.runtime_config.model,
            self.runtime_config.device,
            self.runtime_config.image_size,
            self.runtime_config.confidence,
            self.runtime_config.iou_threshold,
            self.runtime_config.max_detections,
        )

        try:
            torch.set_num_threads(2)
        except RuntimeError:
            log.debug("torch thread count already fixed")

        self.model = YOLO(self.runtime_config.model)
        self.device_str = self.runtime_config.device
        self.model.to(self.device_str)

        self.img_size = self.runtime_config.image_size
        self.max_det = self.runtime_config.max_detections
        self.iou_threshold = self.runtime_config.iou_threshold
        self.conf_threshold = self.runtime_config.confidence
        self.ranking = dict(self.runtime_config.ranking)

        self.detection_count = 0
        self.last_inference_ms = 0.0

    @property
    def labels(self) -> Dict[int, str]:
        return dict(getattr(self.model, "names", {}) or {})

    def process_frame(self, frame: np.ndarray) -> List[RawDetection]:
        """Run YOLO inference on a BGR frame. Errors propagate to the caller."""
        start = time.perf_counter()
        results = self.model.predict(
            source=frame,
            device=self.device_str,
            imgsz=self.img_size,
            conf=self.conf_threshold,
            iou=self.iou_threshold,
            max_det=self.max_det,
            verbose=False,
            stream=False,
        )
        self.last_inference_ms = (time.perf_counter() - start) * 1000.0

        detections = self._analyze_detections(results)
        self.detection_count += len(detections)
        return detections

    def _analyze_detections(self, yolo_results) -> List[RawDetection]:
        """Convert raw YOLO output to ranked RawDetection records."""
        detections: List[RawDetection] = []
        if not yolo_results:
            return detections

        names = yolo_results[0].names
        for detection in yolo_results[0].boxes.data:
            x1, y1, x2, y2, confidence, class_id = detection.cpu().numpy()

            # Model scores at the threshold are still noise for speech
            if confidence <= self.conf_threshold:
                continue

            label = str(names.get(int(class_id), "")).strip() if isinstance(names, dict) else ""
            if not label:
                continue

            detections.append(
                RawDetection(
                    label=label,
                    confidence=float(confidence),
                    bbox=BoundingBox(float(x1), float(y1), float(x2), float(y2)),
                )
            )

        detections.sort(
            key=lambda det: (self.ranking.get(det.label, 0), det.confidence),
            reverse=True,
        )
        return detections[: self.max_det]


__all__ = ["YoloProcessor", "YoloRuntimeConfig"]
