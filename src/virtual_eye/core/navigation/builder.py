"""Factory helpers that wire Virtual Eye subsystems together."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from virtual_eye.core.audio.audio_system import AudioSystem
from virtual_eye.core.audio.guidance_announcer import GuidanceAnnouncer
from virtual_eye.core.navigation.coordinator import Coordinator
from virtual_eye.core.navigation.guidance_engine import GuidanceEngine
from virtual_eye.core.processing.frame_gate import FrameGate
from virtual_eye.core.processing.worker_launcher import WorkerHandle
from virtual_eye.utils.config_sections import load_announcement_config, load_guidance_config

log = logging.getLogger("Builder")


class Builder:
    """Builds a ready-to-run Coordinator."""

    def build_audio_system(self, enable_audio: bool = True) -> Optional[AudioSystem]:
        """AudioSystem, or None when the CLI or AUDIO_ENABLED turns speech off."""
        if not (enable_audio and load_announcement_config().enabled):
            log.info("Audio disabled")
            return None
        return AudioSystem()

    def build_audio(self, enable_audio: bool = True, audio_system: Optional[AudioSystem] = None):
        if audio_system is None:
            audio_system = self.build_audio_system(enable_audio)
        if audio_system is None:
            return None, None
        return audio_system, GuidanceAnnouncer(audio_system)

    def build_engine(self, announce_unclassified: Optional[bool] = None) -> GuidanceEngine:
        config = load_guidance_config()
        if announce_unclassified is not None:
            config = replace(config, announce_unclassified=announce_unclassified)
        return GuidanceEngine(config)

    def build_coordinator(
        self,
        *,
        model_path: Optional[str] = None,
        enable_audio: bool = True,
        audio_system: Optional[AudioSystem] = None,
        announce_unclassified: Optional[bool] = None,
        start_worker: bool = True,
    ) -> Coordinator:
        worker = WorkerHandle(model_path)
        audio_system, announcer = self.build_audio(enable_audio, audio_system)
        coordinator = Coordinator(
            worker,
            self.build_engine(announce_unclassified),
            announcer=announcer,
            audio_system=audio_system,
            frame_gate=FrameGate(),
        )
        if start_worker:
            worker.start()
        return coordinator


__all__ = ["Builder"]
