from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from earshot.interfaces.engine import EngineEvent
from earshot.orchestrator.durations import DurationWindow
from earshot.orchestrator.results import RecognitionHypothesis, ResultLog

class DomainEvent(str, Enum):
    AUDIO_START = "audiostart"
    AUDIO_END = "audioend"
    SOUND_START = "soundstart"
    SOUND_END = "soundend"
    SPEECH_START = "speechstart"
    SPEECH_END = "speechend"
    START = "start"
    END = "end"
    RESULT = "result"
    NO_MATCH = "nomatch"
    ERROR = "error"

@dataclass(frozen=True)
class LifecycleEvent:
    """Payload for start/end and the audio, sound and speech phase events."""
    session_id: str
    timestamp: float
    duration: Optional[DurationWindow]
    original: EngineEvent

@dataclass(frozen=True)
class ResultEvent:
    session_id: str
    timestamp: float
    transcript: str
    results: ResultLog
    raw_results: List[RecognitionHypothesis] = field(default_factory=list)
    original: Optional[EngineEvent] = None

@dataclass(frozen=True)
class NoMatchEvent:
    session_id: str
    timestamp: float
    original: EngineEvent

@dataclass(frozen=True)
class ErrorEvent:
    """Engine failure, relayed verbatim."""
    session_id: str
    timestamp: float
    error: Optional[str]
    message: Optional[str]
    original: EngineEvent
