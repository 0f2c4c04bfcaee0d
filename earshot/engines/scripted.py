import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from earshot.core.exceptions import ScriptError
from earshot.interfaces.engine import (
    ABCRecognitionEngine,
    EngineAlternative,
    EngineCallback,
    EngineEvent,
    EngineResult,
    EngineSignal,
)

logger = logging.getLogger(__name__)

class ScriptedEngine(ABCRecognitionEngine):
    """
    In-memory recognition engine.
    Records the commands it receives and delivers events when told to,
    either one at a time with emit() or from a recorded script with replay().
    stop() ends an open session itself, as a real engine would.
    """

    def __init__(self):
        self.settings: Dict[str, Any] = {}
        self.commands: List[str] = []
        self._callbacks: Dict[EngineSignal, EngineCallback] = {}
        self.active = False
        self._last_timestamp: float = 0

    def configure(self, settings: Dict[str, Any]) -> None:
        self.settings = dict(settings)
        logger.debug("ScriptedEngine configured", extra={"settings": self.settings})

    def start(self) -> None:
        self.commands.append("start")
        self.active = True

    def stop(self) -> None:
        """Record the command and end an open session at the last seen timestamp."""
        self.commands.append("stop")
        if self.active:
            self.emit(EngineSignal.END, EngineEvent(timestamp=self._last_timestamp))

    def abort(self) -> None:
        self.commands.append("abort")
        self.active = False

    def on(self, signal: EngineSignal, callback: Optional[EngineCallback]) -> None:
        signal = EngineSignal(signal)
        if callback is None:
            self._callbacks.pop(signal, None)
        else:
            self._callbacks[signal] = callback

    def emit(self, signal: EngineSignal, event: EngineEvent) -> bool:
        """Deliver one event to its callback slot. Returns False if the slot is empty."""
        signal = EngineSignal(signal)
        self._last_timestamp = event.timestamp
        if signal == EngineSignal.END:
            self.active = False
        callback = self._callbacks.get(signal)
        if callback is None:
            logger.debug(f"No callback bound for {signal.value}")
            return False
        callback(event)
        return True

    def replay(self, steps: Iterable[Dict[str, Any]]) -> int:
        """Emit every step of a parsed script in order; returns the number of steps."""
        count = 0
        for signal, event in parse_script(steps):
            self.emit(signal, event)
            count += 1
        return count

def parse_script(steps: Iterable[Dict[str, Any]]) -> List[tuple]:
    """
    Turn script entries into (signal, EngineEvent) pairs.

    Each entry is {"signal": name, "timestamp": ms}; result entries add
    "results": [{"is_final": bool, "alternatives": [{"transcript": s, "confidence": f}]}],
    error entries add "error" and optionally "message".

    Raises:
        ScriptError: on unknown signals or missing/invalid fields
    """
    parsed = []
    for position, step in enumerate(steps):
        if not isinstance(step, dict):
            raise ScriptError(f"Step {position}: expected an object, got {type(step).__name__}")
        try:
            signal = EngineSignal(step["signal"])
        except KeyError:
            raise ScriptError(f"Step {position}: missing 'signal'") from None
        except ValueError:
            raise ScriptError(f"Step {position}: unknown signal {step['signal']!r}") from None

        try:
            timestamp = float(step.get("timestamp", 0))
            results = [
                EngineResult(
                    alternatives=[
                        EngineAlternative(transcript=str(a["transcript"]), confidence=float(a["confidence"]))
                        for a in group.get("alternatives", [])
                    ],
                    is_final=bool(group.get("is_final", False)),
                )
                for group in step.get("results", [])
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ScriptError(f"Step {position}: malformed {signal.value} event: {e}") from e

        parsed.append((signal, EngineEvent(
            timestamp=timestamp,
            results=results,
            error=step.get("error"),
            message=step.get("message"),
        )))
    return parsed

def load_script(path: Union[str, Path]) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            steps = json.load(f)
    except json.JSONDecodeError as e:
        raise ScriptError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(steps, list):
        raise ScriptError(f"{path}: expected a list of steps")
    return steps
