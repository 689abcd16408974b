"""
Speech gating for guidance contexts.

Guidance is re-voiced only when its text changes or the safety flag flips.
Warnings are spoken first at the urgent rate; the guidance follows after a
fixed delay through a cancellable timer, so a newer announcement (or
shutdown) pre-empts speech that is still pending.

State machine:
    IDLE -> SPEAKING_URGENT -> [timer] -> SPEAKING_NORMAL -> IDLE
    IDLE -> SPEAKING_NORMAL -> IDLE                       (no warning)
    any  -> new context: cancel pending timer, stop speech, restart

Usage:
    announcer = GuidanceAnnouncer(audio_system)
    announcer.announce(context)
    ...
    announcer.close()
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Optional

from virtual_eye.core.navigation.guidance_engine import NavigationContext
from virtual_eye.core.telemetry.loggers.navigation_logger import get_navigation_logger
from virtual_eye.core.vision.detected_object import Direction, Priority
from virtual_eye.utils.config_sections import AnnouncementConfig, load_announcement_config


class AnnouncerState(Enum):
    IDLE = "idle"
    SPEAKING_URGENT = "speaking_urgent"
    SPEAKING_NORMAL = "speaking_normal"


class CancellationToken:
    """One-shot flag shared between an announcement and its deferred speech."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def _alert_direction(context: NavigationContext) -> Direction:
    for obj in context.objects:
        if obj.priority == Priority.CRITICAL:
            return obj.direction
    return Direction.CENTER


class GuidanceAnnouncer:
    """Decides when to speak a NavigationContext and sequences warning + guidance."""

    def __init__(
        self,
        audio_system,
        config: Optional[AnnouncementConfig] = None,
        *,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self.audio = audio_system
        self.config = config or load_announcement_config()
        self.warning_delay = max(0.0, float(self.config.warning_delay))
        self._timer_factory = timer_factory

        # Re-entrant: audio callbacks may announce while deferred speech holds it
        self._lock = threading.RLock()
        self._state = AnnouncerState.IDLE
        self._timer: Optional[threading.Timer] = None
        self._token: Optional[CancellationToken] = None
        self._last_context: Optional[NavigationContext] = None
        self._closed = False

        self.announcements = 0
        self.skipped = 0

    @property
    def last_context(self) -> Optional[NavigationContext]:
        return self._last_context

    @property
    def state(self) -> AnnouncerState:
        with self._lock:
            if self._state == AnnouncerState.SPEAKING_NORMAL and not self.audio.is_speaking:
                self._state = AnnouncerState.IDLE
            return self._state

    @property
    def has_pending(self) -> bool:
        return self._timer is not None

    def should_announce(self, context: NavigationContext) -> bool:
        previous = self._last_context
        if previous is None:
            return True
        return (
            context.guidance != previous.guidance
            or context.is_safe_to_move != previous.is_safe_to_move
        )

    def announce(self, context: NavigationContext) -> bool:
        """Speak ``context`` if it differs from the last one. Returns True when announced."""
        logger = get_navigation_logger().audio
        if self._closed:
            return False

        if not self.should_announce(context):
            self.skipped += 1
            logger.debug(f"Skipped unchanged guidance: '{context.guidance}'")
            return False

        self.cancel_pending()
        self.audio.stop()

        with self._lock:
            self._last_context = context
            self.announcements += 1

            if context.warning:
                token = CancellationToken()
                timer = self._timer_factory(
                    self.warning_delay,
                    self._speak_deferred,
                    args=(context.guidance, token),
                )
                timer.daemon = True
                self._token = token
                self._timer = timer
                self._state = AnnouncerState.SPEAKING_URGENT
            else:
                timer = None
                self._state = AnnouncerState.SPEAKING_NORMAL

        if timer is not None:
            if not context.is_safe_to_move:
                self.audio.play_alert_beep(_alert_direction(context))
            logger.info(f"Warning: '{context.warning}' (guidance in {self.warning_delay:.1f}s)")
            self.audio.speak(context.warning, urgent=True)
            timer.start()
        else:
            logger.info(f"Guidance: '{context.guidance}'")
            self.audio.speak(context.guidance)
        return True

    def _speak_deferred(self, guidance: str, token: CancellationToken) -> None:
        # Held across stop()/speak() so a concurrent announce() waits for us,
        # then cancels and replaces this guidance.
        with self._lock:
            if token.cancelled or self._closed:
                return
            self.audio.stop()
            # stop() may have handed control to a newer announcement
            if token.cancelled or self._closed:
                return
            self._timer = None
            self._token = None
            self._state = AnnouncerState.SPEAKING_NORMAL
            get_navigation_logger().audio.info(f"Deferred guidance: '{guidance}'")
            self.audio.speak(guidance)

    def cancel_pending(self) -> None:
        with self._lock:
            if self._token is not None:
                self._token.cancel()
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._token = None
            if self._state == AnnouncerState.SPEAKING_URGENT:
                self._state = AnnouncerState.IDLE

    def reset(self) -> None:
        """Forget the last spoken context so the next one is always announced."""
        self.cancel_pending()
        self._last_context = None

    def close(self) -> None:
        self.cancel_pending()
        with self._lock:
            self._closed = True
            self._state = AnnouncerState.IDLE
        self.audio.stop()


__all__ = ["AnnouncerState", "CancellationToken", "GuidanceAnnouncer"]
