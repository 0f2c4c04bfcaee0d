import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict

logger = logging.getLogger(__name__)

class Window(str, Enum):
    AUDIO = "audio"
    SOUND = "sound"
    SPEECH = "speech"
    SESSION = "session"

@dataclass
class DurationWindow:
    """Start/end timestamps in milliseconds; 0 means the callback has not fired yet."""
    start: float = 0
    end: float = 0

    @property
    def observed(self) -> bool:
        return self.start != 0 and self.end != 0

    @property
    def elapsed(self) -> float:
        # Not meaningful until both bounds are observed
        return (self.end - self.start) / 1000

class DurationTracker:
    """
    Start/end timestamps for the timed phases of a recognition session.
    Each mark overwrites the previous value for that bound; nothing accumulates.
    """

    def __init__(self):
        self._windows: Dict[Window, DurationWindow] = {}
        self.reset()

    def reset(self):
        self._windows = {window: DurationWindow() for window in Window}

    def mark_start(self, window: Window, timestamp: float):
        self._check_timestamp(window, timestamp)
        self._windows[Window(window)].start = timestamp

    def mark_end(self, window: Window, timestamp: float):
        self._check_timestamp(window, timestamp)
        self._windows[Window(window)].end = timestamp

    def elapsed(self, window: Window) -> float:
        """Seconds between start and end of a window: (end - start) / 1000."""
        return self._windows[Window(window)].elapsed

    def snapshot(self, window: Window) -> DurationWindow:
        """Copy of a window, safe to hand to subscribers."""
        return replace(self._windows[Window(window)])

    def _check_timestamp(self, window: Window, timestamp: float):
        if timestamp < 0:
            logger.warning(f"Negative timestamp for {Window(window).value} window: {timestamp}",
                           extra={"window": Window(window).value, "event_timestamp": timestamp})
