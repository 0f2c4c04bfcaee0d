import pytest

from earshot.core.config import Config, RecognitionConfig
from earshot.engines.scripted import ScriptedEngine
from earshot.interfaces.engine import EngineAlternative, EngineEvent, EngineResult
from earshot.recognizer import SpeechRecognizer

def group(*alternatives, is_final=True):
    """group(("hello", 0.9), ("halo", 0.4)) -> EngineResult"""
    return EngineResult(
        alternatives=[EngineAlternative(transcript=t, confidence=c) for t, c in alternatives],
        is_final=is_final,
    )

def result_event(timestamp, *groups):
    return EngineEvent(timestamp=timestamp, results=list(groups))

@pytest.fixture
def engine():
    return ScriptedEngine()

@pytest.fixture
def recognition_config():
    return RecognitionConfig()

@pytest.fixture
def make_recognizer(engine):
    def _make(**recognition):
        config = Config.load({"recognition": recognition}, environ={})
        return SpeechRecognizer(engine, config)
    return _make
