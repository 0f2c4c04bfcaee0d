from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

class EngineSignal(str, Enum):
    """Callback slots a recognition engine exposes."""
    START = "start"
    END = "end"
    SPEECH_START = "speechstart"
    SPEECH_END = "speechend"
    AUDIO_START = "audiostart"
    AUDIO_END = "audioend"
    SOUND_START = "soundstart"
    SOUND_END = "soundend"
    RESULT = "result"
    NO_MATCH = "nomatch"
    ERROR = "error"

@dataclass(frozen=True)
class EngineAlternative:
    transcript: str
    confidence: float

@dataclass(frozen=True)
class EngineResult:
    """
    Alternatives the engine returned for one recognized span.
    Ordered by the engine's rank; index 0 is its best guess.
    """
    alternatives: List[EngineAlternative] = field(default_factory=list)
    is_final: bool = False

    def __len__(self) -> int:
        return len(self.alternatives)

    def __iter__(self):
        return iter(self.alternatives)

    def __getitem__(self, index: int) -> EngineAlternative:
        return self.alternatives[index]

@dataclass(frozen=True)
class EngineEvent:
    """Event object delivered to every callback slot."""
    timestamp: float
    results: List[EngineResult] = field(default_factory=list)
    error: Optional[str] = None
    message: Optional[str] = None

EngineCallback = Callable[[EngineEvent], None]

class ABCRecognitionEngine(ABC):
    """
    Interface for speech recognition engines.
    Responsibility: turn captured audio into lifecycle and result callbacks.
    Callbacks are delivered serially, in chronological order, one session at a time.
    """

    @abstractmethod
    def configure(self, settings: Dict[str, Any]) -> None:
        """
        Apply engine settings: continuous, interim_results, lang,
        max_alternatives, service_uri, grammars.
        """
        pass

    @abstractmethod
    def start(self) -> None:
        """Begin listening for speech."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop listening and deliver whatever has been recognized so far, then end."""
        pass

    @abstractmethod
    def abort(self) -> None:
        """Stop listening immediately, discarding pending results."""
        pass

    @abstractmethod
    def on(self, signal: EngineSignal, callback: Optional[EngineCallback]) -> None:
        """Fill (or clear, with None) the callback slot for a signal."""
        pass
