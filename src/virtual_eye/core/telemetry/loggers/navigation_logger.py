"""
Dedicated logger for guidance and audio debugging.

This module provides a singleton logger that separates navigation debugging logs
into dedicated files for easier analysis and troubleshooting.

Features:
- Singleton pattern (one instance per session)
- Separate log files for guidance decisions, audio, worker and capture
- DEBUG level logging to files
- WARNING level console output for critical messages

Log Files:
- decision_engine.log: Tier selection and guidance text per cycle
- audio_system.log: TTS, gating and deferred speech events
- inference_worker.log: Worker lifecycle and per-frame summaries
- capture.log: Frame gating and camera lifecycle

Usage:
    from virtual_eye.core.telemetry.loggers.navigation_logger import get_navigation_logger

    nav_logger = get_navigation_logger(session_dir=Path("logs/session_2026-01-15_10-30-00"))
    nav_logger.decision.debug("Analyzing 3 objects")
    nav_logger.audio.info("Speaking guidance")
"""

import logging
from datetime import datetime
from pathlib import Path

CHANNELS = {
    "decision": "decision_engine.log",
    "audio": "audio_system.log",
    "worker": "inference_worker.log",
    "capture": "capture.log",
}


class NavigationLogger:
    """Singleton logger for guidance and audio debugging."""

    _instance = None
    _initialized = False

    def __new__(cls, session_dir: Path = None, channels=None, file_mode: str = "w"):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, session_dir: Path = None, channels=None, file_mode: str = "w"):
        if self._initialized:
            return

        self.channels = tuple(channels) if channels else tuple(CHANNELS)
        self.file_mode = file_mode

        if session_dir is None:
            from virtual_eye.utils.config import Config

            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            self.log_dir = Path(getattr(Config, "LOG_DIR", "logs")) / f"session_{timestamp}"
        else:
            self.log_dir = Path(session_dir)

        self.log_dir.mkdir(parents=True, exist_ok=True)

        for name in self.channels:
            self._setup_logger(name, CHANNELS[name])

        self._initialized = True

    def _setup_logger(self, name: str, filename: str):
        """Setup individual logger with file handler."""
        logger = logging.getLogger(f"nav.{name}")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        # Clear existing handlers
        logger.handlers.clear()

        fh = logging.FileHandler(self.log_dir / filename, mode=self.file_mode)
        fh.setLevel(logging.DEBUG)

        # Console handler for critical messages only
        ch = logging.StreamHandler()
        ch.setLevel(logging.WARNING)

        formatter = logging.Formatter(
            '%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s',
            datefmt='%H:%M:%S'
        )
        fh.setFormatter(formatter)
        ch.setFormatter(formatter)

        logger.addHandler(fh)
        logger.addHandler(ch)

        setattr(self, name, logger)

    def close(self):
        """Close all handlers."""
        for name in self.channels:
            logger = getattr(self, name, None)
            if logger:
                for handler in logger.handlers[:]:
                    handler.close()
                    logger.removeHandler(handler)


# Global instance
_nav_logger = None


def get_navigation_logger(session_dir: Path = None, channels=None, file_mode: str = "w"):
    """
    Get or create navigation logger instance.

    A worker process joins the parent's session by passing its session_dir
    with only its own channel and file_mode="a".
    """
    global _nav_logger
    if _nav_logger is None:
        _nav_logger = NavigationLogger(session_dir=session_dir, channels=channels, file_mode=file_mode)
    return _nav_logger


def reset_navigation_logger() -> None:
    """Close and forget the current instance (a new session starts on next get)."""
    global _nav_logger
    if _nav_logger is not None:
        _nav_logger.close()
    _nav_logger = None
    NavigationLogger._instance = None
    NavigationLogger._initialized = False
