#!/usr/bin/env python3
"""
Virtual Eye - spoken scene guidance for blind and low-vision users.

Architecture:
- CameraManager: OpenCV capture only
- WorkerHandle / InferenceWorker: YOLO inference in a separate process
- Coordinator: gating, enrichment, guidance and speech
- StatusDisplay: preview window with the narration band
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from virtual_eye.core.hardware.camera_manager import (
    CameraDescription,
    CameraError,
    CameraManager,
    enumerate_cameras,
)
from virtual_eye.core.navigation.builder import Builder
from virtual_eye.core.navigation.coordinator import READY_TEXT
from virtual_eye.presentation.status_display import StatusDisplay
from virtual_eye.utils.config import Config
from virtual_eye.utils.ctrl_handler import CtrlCHandler

log = logging.getLogger("main")

PAUSED_TEXT = "Paused"
NO_CAMERAS_SPEECH = "No cameras available"
CAMERA_FAILED_SPEECH = "Failed to initialize camera"


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Virtual Eye navigation aid")
    parser.add_argument("--camera", type=int, default=Config.CAMERA_INDEX, help="Camera index to use")
    parser.add_argument("--model", default=None, help="YOLO weights (defaults to Config.YOLO_MODEL)")
    parser.add_argument("--no-audio", dest="audio", action="store_false", help="Disable speech")
    parser.add_argument("--no-display", dest="display", action="store_false", help="Run without a window")
    parser.add_argument("--list-cameras", action="store_true", help="List available cameras and exit")
    parser.add_argument(
        "--announce-unclassified",
        action="store_true",
        default=None,
        help="Describe objects outside the guidance tables instead of the empty-scene prompt",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.set_defaults(audio=Config.AUDIO_ENABLED, display=Config.DISPLAY_ENABLED)
    return parser.parse_args(argv)


def select_camera(cameras: List[CameraDescription], index: int) -> Optional[CameraDescription]:
    for camera in cameras:
        if camera.index == index:
            return camera
    return None


def report_startup_failure(audio_system, message: str, speech: str) -> int:
    """Log a startup failure and say it out loud before exiting."""
    log.error("%s", message)
    if audio_system is not None:
        audio_system.speak(speech)
        audio_system.wait_until_done()
        audio_system.close()
    return 1


def toggle_pause(camera: CameraManager, coordinator) -> bool:
    """Release the camera while paused and reopen it on resume. False if it cannot reopen."""
    if not camera.paused:
        camera.pause()
        coordinator.notify(PAUSED_TEXT)
        return True

    try:
        camera.resume()
    except CameraError as err:
        log.error("%s", err)
        coordinator.notify(str(err), speech=CAMERA_FAILED_SPEECH)
        return False

    if coordinator.announcer is not None:
        coordinator.announcer.reset()
    coordinator.notify(READY_TEXT)
    return True


def run(args: argparse.Namespace) -> int:
    cameras = enumerate_cameras()

    if args.list_cameras:
        for camera in cameras:
            print(f"{camera.index}: {camera.width}x{camera.height}")
        return 0

    builder = Builder()
    audio_system = builder.build_audio_system(args.audio)

    if not cameras:
        return report_startup_failure(audio_system, "No cameras found", NO_CAMERAS_SPEECH)

    description = select_camera(cameras, args.camera)
    if description is None:
        return report_startup_failure(
            audio_system,
            f"No camera at index {args.camera} (found {len(cameras)} cameras)",
            CAMERA_FAILED_SPEECH,
        )

    camera = CameraManager(description)
    try:
        camera.open()
    except CameraError as err:
        return report_startup_failure(audio_system, str(err), CAMERA_FAILED_SPEECH)

    ctrl_handler = CtrlCHandler()
    coordinator = builder.build_coordinator(
        model_path=args.model,
        enable_audio=args.audio,
        audio_system=audio_system,
        announce_unclassified=args.announce_unclassified,
    )
    display = StatusDisplay(show=args.display)
    last_frame = None

    try:
        while not ctrl_handler.should_stop:
            ok, frame = camera.read()
            if ok:
                last_frame = frame
                coordinator.on_frame(frame)
            else:
                time.sleep(0.01)
            coordinator.process_worker_messages()

            if last_frame is None:
                continue

            status = coordinator.status
            key = display.update(last_frame, status.text, status.level)
            if key == ord('q'):
                break
            if key == ord('i'):
                log.info("Debug info: %s", coordinator.get_debug_info())
            if key == ord('p') and not toggle_pause(camera, coordinator):
                break
    finally:
        coordinator.shutdown()
        camera.release()
        display.close()
        log.info("Shutdown complete")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
