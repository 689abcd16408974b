import logging
import signal

log = logging.getLogger(__name__)


class CtrlCHandler:
    """
    Handle Ctrl+C for a clean shutdown so the worker process is joined,
    pending speech is cancelled and the camera is released.
    """
    def __init__(self):
        self.should_stop = False
        signal.signal(signal.SIGINT, self._signal_handler)

    def _signal_handler(self, sig, frame):
        """Callback executed when Ctrl+C is detected"""
        log.info("Interrupt signal detected, closing cleanly...")
        self.should_stop = True
