"""
Centralized configuration for the Virtual Eye navigation aid.

This module provides all configuration constants and runtime settings for:
- Device detection (CUDA, MPS, CPU)
- YOLO object detection (classifier adapter)
- Frame submission gating and the inference worker process
- Guidance engine and announcement policy
- Audio system (TTS and alert beeps)
- Camera capture and status display

The Config class contains all constants as class attributes, making them
accessible throughout the application without instantiation.

Usage:
    from virtual_eye.utils.config import Config

    interval = Config.FRAME_MIN_INTERVAL
    if Config.GUIDANCE_ANNOUNCE_UNCLASSIFIED:
        # Announce labels outside the guidance tables
"""

import logging

import torch

log = logging.getLogger(__name__)


def detect_device() -> str:
    """
    Detect the best available device for PyTorch operations.

    Priority order: CUDA (NVIDIA GPU) > MPS (Apple Silicon) > CPU

    Returns:
        str: Device identifier ("cuda", "mps", or "cpu")
    """
    if torch.cuda.is_available():
        log.info("GPU: %s", torch.cuda.get_device_name(0))
        return "cuda"
    if torch.backends.mps.is_available():
        log.info("Apple MPS")
        return "mps"
    log.info("CPU (no GPU acceleration)")
    return "cpu"


DEVICE = detect_device()


class Config:
    """System configuration constants for Virtual Eye."""

    # ==========================================================================
    # CAMERA
    # ==========================================================================

    CAMERA_INDEX = 0                    # Default camera when none is requested
    CAMERA_SCAN_MAX_INDEX = 5          # Indices scanned by enumerate_cameras()
    CAMERA_FRAME_WIDTH = 640            # Requested capture resolution
    CAMERA_FRAME_HEIGHT = 480

    # ==========================================================================
    # YOLO DETECTION
    # ==========================================================================

    YOLO_MODEL = "checkpoints/yolo11n.pt"
    YOLO_DEVICE = DEVICE                # AUTO: cuda/mps/cpu
    YOLO_CONFIDENCE = 0.30              # Scores at or below are discarded
    YOLO_IMAGE_SIZE = 320
    YOLO_MAX_DETECTIONS = 10
    YOLO_IOU_THRESHOLD = 0.45

    # Ordering applied to raw detections before they leave the worker
    # (higher first, then by score). Labels not listed rank 0.
    DETECTION_RANKING = {
        "person": 10,
        "car": 5,
        "bus": 5,
        "truck": 5,
        "bicycle": 4,
        "motorcycle": 4,
        "dog": 3,
        "cat": 3,
        "chair": 2,
        "bottle": 2,
    }

    # ==========================================================================
    # FRAME SUBMISSION & WORKER
    # ==========================================================================

    FRAME_MIN_INTERVAL = 0.5            # Seconds between inference requests
    WORKER_QUEUE_SIZE = 1               # One in-flight frame at most
    WORKER_RESULT_QUEUE_SIZE = 8
    WORKER_JOIN_TIMEOUT = 2.0           # Seconds before terminate()
    WORKER_LOG_EVERY_N_FRAMES = 30

    # ==========================================================================
    # GUIDANCE
    # ==========================================================================

    GUIDANCE_ANNOUNCE_UNCLASSIFIED = False  # Fallback tier for out-of-table labels
    GUIDANCE_UNCLASSIFIED_MAX_LABELS = 3
    GUIDANCE_ALSO_DETECTED_MAX = 2

    # ==========================================================================
    # AUDIO SYSTEM
    # ==========================================================================

    AUDIO_ENABLED = True
    TTS_RATE = 170                      # Words per minute for guidance
    TTS_URGENT_RATE = 220               # Faster delivery for warnings
    TTS_VOLUME = 1.0
    TTS_LANGUAGE = "en-US"
    WARNING_GUIDANCE_DELAY = 2.0        # Seconds between warning and guidance

    AUDIO_ALERT_BEEPS_ENABLED = True
    BEEP_ALERT_FREQUENCY = 1000
    BEEP_ALERT_DURATION = 0.25
    BEEP_VOLUME = 0.7

    # ==========================================================================
    # DISPLAY
    # ==========================================================================

    DISPLAY_ENABLED = True
    DISPLAY_WINDOW_NAME = "Virtual Eye"
    DISPLAY_BAND_HEIGHT = 70
    DISPLAY_FONT_SCALE = 0.6

    # Status colours (BGR)
    STATUS_COLORS = {
        "danger": (0, 0, 200),
        "caution": (0, 165, 255),
        "clear": (60, 60, 40),
        "info": (80, 80, 80),
    }

    # ==========================================================================
    # LOGGING
    # ==========================================================================

    LOG_DIR = "logs"
