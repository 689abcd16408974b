import logging
import platform
import shutil
import subprocess
import threading
import time
from typing import Optional

import numpy as np

# Hardware-backed libraries: audio is disabled when they are missing
try:
    import sounddevice as sd
except ImportError:
    sd = None

try:
    import pyttsx3
except ImportError:
    pyttsx3 = None

from virtual_eye.core.telemetry.loggers.navigation_logger import get_navigation_logger
from virtual_eye.core.vision.detected_object import Direction
from virtual_eye.utils.config_sections import AudioConfig, load_audio_config

log = logging.getLogger("AudioSystem")

if sd is None:
    log.warning("sounddevice not found. Alert beeps will be disabled.")
if pyttsx3 is None:
    log.warning("pyttsx3 not found. TTS will be disabled on non-macOS systems.")

# Left/right channel gains per direction
_PANNING = {
    Direction.FAR_LEFT: (1.0, 0.1),
    Direction.LEFT: (1.0, 0.4),
    Direction.CENTER: (1.0, 1.0),
    Direction.RIGHT: (0.4, 1.0),
    Direction.FAR_RIGHT: (0.1, 1.0),
}


class AudioSystem:
    """Spoken guidance output with interruptible utterances, multi-platform."""

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or load_audio_config()
        self.tts_engine = None
        self.tts_backend: Optional[str] = None
        self._process: Optional[subprocess.Popen] = None
        self._lock = threading.Lock()
        self._generation = 0
        self.tts_speaking = False
        self.last_message: Optional[str] = None
        self.messages_spoken = 0
        self.alert_beeps = 0
        self._setup_tts()
        log.info("Audio system initialized (backend=%s)", self.tts_backend)

    @property
    def is_speaking(self) -> bool:
        return self.tts_speaking

    def _setup_tts(self):
        """Configure TTS based on the operating system."""
        system = platform.system()

        if system == "Darwin" and shutil.which('say'):
            self.tts_backend = "say"
            log.info("Using 'say' for TTS on macOS.")
        elif pyttsx3:
            try:
                self.tts_engine = pyttsx3.init()
                self.tts_engine.setProperty('rate', self.config.tts_rate)
                self.tts_engine.setProperty('volume', self.config.tts_volume)
                self._apply_language()
                self.tts_backend = "pyttsx3"
                log.info("Using pyttsx3 for TTS on %s (rate=%s).", system, self.config.tts_rate)
            except Exception as e:
                log.error("Failed to initialize pyttsx3: %s", e)
                self.tts_backend = None
        else:
            log.warning("No supported TTS backend found for %s.", system)
            self.tts_backend = None

    def _apply_language(self) -> None:
        """Pick the first installed pyttsx3 voice matching the configured language."""
        wanted = self.config.language.lower().replace("_", "-")
        prefix = wanted.split("-")[0]
        fallback = None
        for voice in self.tts_engine.getProperty('voices') or []:
            tags = [str(getattr(voice, "id", "")).lower()]
            for language in getattr(voice, "languages", None) or []:
                if isinstance(language, bytes):
                    language = language.decode("utf-8", errors="ignore")
                tags.append(str(language).lower().replace("_", "-").strip("\x05 "))
            if any(wanted in tag for tag in tags):
                self.tts_engine.setProperty('voice', voice.id)
                log.info("TTS voice %s (%s)", voice.id, self.config.language)
                return
            if fallback is None and any(tag.startswith(prefix) for tag in tags[1:]):
                fallback = voice
        if fallback is not None:
            self.tts_engine.setProperty('voice', fallback.id)
            log.info("TTS voice %s (closest to %s)", fallback.id, self.config.language)
        else:
            log.warning("No TTS voice for %s, keeping the default", self.config.language)

    def speak(self, message: str, *, urgent: bool = False) -> bool:
        """Start speaking on a daemon thread. Returns False when nothing was started."""
        if not message or not self.tts_backend:
            return False

        rate = self.config.tts_urgent_rate if urgent else self.config.tts_rate
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.last_message = message
            self.messages_spoken += 1
            self.tts_speaking = True

        get_navigation_logger().audio.info(f"speak('{message}', urgent={urgent}, rate={rate})")

        def _speak():
            try:
                if self.tts_backend == "say":
                    process = subprocess.Popen(["say", "-r", str(rate), message])
                    with self._lock:
                        self._process = process
                    process.wait()
                elif self.tts_backend == "pyttsx3" and self.tts_engine:
                    self.tts_engine.setProperty('rate', rate)
                    self.tts_engine.say(message)
                    self.tts_engine.runAndWait()  # Blocking, fine in a thread
            except Exception as e:
                log.warning("TTS error: %s", e)
            finally:
                with self._lock:
                    if generation == self._generation:
                        self.tts_speaking = False
                        self._process = None

        threading.Thread(target=_speak, daemon=True).start()
        return True

    def wait_until_done(self, timeout: float = 5.0) -> bool:
        """Block until the current utterance ends. False if it is still going after timeout."""
        deadline = time.monotonic() + timeout
        while self.tts_speaking:
            if time.monotonic() >= deadline:
                return False
            time.sleep(0.05)
        return True

    def stop(self) -> None:
        """Interrupt the current utterance, if any."""
        with self._lock:
            process = self._process
            self._process = None
            self._generation += 1
        if process is not None and process.poll() is None:
            process.terminate()
        if self.tts_backend == "pyttsx3" and self.tts_engine and self.tts_speaking:
            try:
                self.tts_engine.stop()
            except RuntimeError as e:
                log.debug("pyttsx3 stop ignored: %s", e)
        self.tts_speaking = False

    def play_alert_beep(self, direction: Direction = Direction.CENTER) -> None:
        """Short stereo-panned tone played ahead of a critical warning."""
        if not self.config.beeps_enabled:
            return
        if sd is None:
            return

        sample_rate = 44100
        duration = self.config.beep_duration
        t = np.linspace(0, duration, int(sample_rate * duration), False)
        tone = np.sin(2 * np.pi * self.config.beep_frequency * t)

        fade_samples = int(sample_rate * 0.01)
        if len(tone) > fade_samples * 2:
            tone[:fade_samples] *= np.linspace(0, 1, fade_samples)
            tone[-fade_samples:] *= np.linspace(1, 0, fade_samples)
        tone *= self.config.beep_volume

        left_gain, right_gain = _PANNING[direction]
        audio_data = np.column_stack((tone * left_gain, tone * right_gain))

        try:
            sd.play(audio_data, samplerate=sample_rate, blocking=False)
            self.alert_beeps += 1
        except Exception as e:
            log.warning("Failed to play alert beep with sounddevice: %s", e)

    def close(self):
        self.stop()
        log.info("AudioSystem closed.")

