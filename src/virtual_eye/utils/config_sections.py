"""
Typed configuration sections for Virtual Eye.

This module provides strongly-typed configuration sections to replace
scattered getattr(Config, ...) calls with proper type hints and defaults.

Benefits:
- Type safety: IDE autocomplete and type checking
- Default values: Centralized and documented
- Better testing: Can mock entire config sections
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class CameraConfig:
    """Configuration for camera discovery and capture."""

    index: int = 0
    scan_max_index: int = 5
    frame_width: int = 640
    frame_height: int = 480


@dataclass
class YoloConfig:
    """Configuration for YOLO object detection."""

    model: str = "checkpoints/yolo11n.pt"
    device: str = "cpu"
    confidence: float = 0.30
    image_size: int = 320
    max_detections: int = 10
    iou_threshold: float = 0.45
    ranking: Dict[str, int] = field(default_factory=dict)


@dataclass
class FrameGateConfig:
    """Configuration for drop-based frame submission."""

    min_interval: float = 0.5  # Seconds between inference requests


@dataclass
class WorkerConfig:
    """Configuration for the inference worker process."""

    queue_size: int = 1
    result_queue_size: int = 8
    join_timeout: float = 2.0
    log_every_n_frames: int = 30


@dataclass
class GuidanceConfig:
    """Configuration for the scene-analysis cascade."""

    announce_unclassified: bool = False
    unclassified_max_labels: int = 3
    also_detected_max: int = 2


@dataclass
class AnnouncementConfig:
    """Configuration for speech gating."""

    enabled: bool = True
    warning_delay: float = 2.0  # Seconds between warning and guidance


@dataclass
class AudioConfig:
    """Configuration for TTS and alert beeps."""

    tts_rate: int = 170
    tts_urgent_rate: int = 220
    tts_volume: float = 1.0
    language: str = "en-US"
    beeps_enabled: bool = True
    beep_frequency: float = 1000
    beep_duration: float = 0.25
    beep_volume: float = 0.7


def load_camera_config() -> CameraConfig:
    """
    Load camera configuration from Config with fallback defaults.

    Returns:
        CameraConfig with values from Config or defaults
    """
    from virtual_eye.utils.config import Config

    return CameraConfig(
        index=getattr(Config, "CAMERA_INDEX", 0),
        scan_max_index=getattr(Config, "CAMERA_SCAN_MAX_INDEX", 5),
        frame_width=getattr(Config, "CAMERA_FRAME_WIDTH", 640),
        frame_height=getattr(Config, "CAMERA_FRAME_HEIGHT", 480),
    )


def load_yolo_config() -> YoloConfig:
    """
    Load YOLO configuration from Config with fallback defaults.

    Returns:
        YoloConfig with values from Config or defaults
    """
    from virtual_eye.utils.config import Config

    return YoloConfig(
        model=getattr(Config, "YOLO_MODEL", "checkpoints/yolo11n.pt"),
        device=getattr(Config, "YOLO_DEVICE", "cpu"),
        confidence=getattr(Config, "YOLO_CONFIDENCE", 0.30),
        image_size=getattr(Config, "YOLO_IMAGE_SIZE", 320),
        max_detections=getattr(Config, "YOLO_MAX_DETECTIONS", 10),
        iou_threshold=getattr(Config, "YOLO_IOU_THRESHOLD", 0.45),
        ranking=dict(getattr(Config, "DETECTION_RANKING", {})),
    )


def load_frame_gate_config() -> FrameGateConfig:
    """Load frame gate configuration from Config with fallback defaults."""
    from virtual_eye.utils.config import Config

    return FrameGateConfig(
        min_interval=getattr(Config, "FRAME_MIN_INTERVAL", 0.5),
    )


def load_worker_config() -> WorkerConfig:
    """Load worker configuration from Config with fallback defaults."""
    from virtual_eye.utils.config import Config

    return WorkerConfig(
        queue_size=getattr(Config, "WORKER_QUEUE_SIZE", 1),
        result_queue_size=getattr(Config, "WORKER_RESULT_QUEUE_SIZE", 8),
        join_timeout=getattr(Config, "WORKER_JOIN_TIMEOUT", 2.0),
        log_every_n_frames=getattr(Config, "WORKER_LOG_EVERY_N_FRAMES", 30),
    )


def load_guidance_config() -> GuidanceConfig:
    """Load guidance configuration from Config with fallback defaults."""
    from virtual_eye.utils.config import Config

    return GuidanceConfig(
        announce_unclassified=getattr(Config, "GUIDANCE_ANNOUNCE_UNCLASSIFIED", False),
        unclassified_max_labels=getattr(Config, "GUIDANCE_UNCLASSIFIED_MAX_LABELS", 3),
        also_detected_max=getattr(Config, "GUIDANCE_ALSO_DETECTED_MAX", 2),
    )


def load_announcement_config() -> AnnouncementConfig:
    """Load announcement configuration from Config with fallback defaults."""
    from virtual_eye.utils.config import Config

    return AnnouncementConfig(
        enabled=getattr(Config, "AUDIO_ENABLED", True),
        warning_delay=getattr(Config, "WARNING_GUIDANCE_DELAY", 2.0),
    )


def load_audio_config() -> AudioConfig:
    """Load audio configuration from Config with fallback defaults."""
    from virtual_eye.utils.config import Config

    return AudioConfig(
        tts_rate=getattr(Config, "TTS_RATE", 170),
        tts_urgent_rate=getattr(Config, "TTS_URGENT_RATE", 220),
        tts_volume=getattr(Config, "TTS_VOLUME", 1.0),
        language=getattr(Config, "TTS_LANGUAGE", "en-US"),
        beeps_enabled=getattr(Config, "AUDIO_ALERT_BEEPS_ENABLED", True),
        beep_frequency=getattr(Config, "BEEP_ALERT_FREQUENCY", 1000),
        beep_duration=getattr(Config, "BEEP_ALERT_DURATION", 0.25),
        beep_volume=getattr(Config, "BEEP_VOLUME", 0.7),
    )
