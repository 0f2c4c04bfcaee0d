"""
Earshot - observable speech recognition sessions.

Example Usage:
    from earshot.engines.scripted import ScriptedEngine
    from earshot.orchestrator.events import DomainEvent
    from earshot.recognizer import SpeechRecognizer

    recognizer = SpeechRecognizer(ScriptedEngine())
    recognizer.subscribe(DomainEvent.RESULT, lambda e: print(e.transcript))
    recognizer.start()
"""

import logging
from typing import List, Optional

from earshot.core.config import Config
from earshot.interfaces.engine import ABCRecognitionEngine
from earshot.orchestrator.bridge import EventBridge
from earshot.orchestrator.events import DomainEvent
from earshot.orchestrator.fsm import SessionController
from earshot.orchestrator.results import ResultLog
from earshot.orchestrator.router import EventHandler, EventRouter

logger = logging.getLogger(__name__)

class SpeechRecognizer:
    """
    Observable wrapper around a recognition engine.

    Wires a SessionController, an EventBridge and a per-instance EventRouter
    together. Subscribers register for DomainEvent names and receive payloads
    synchronously, inside the engine callback that produced them.
    """

    def __init__(self, engine: ABCRecognitionEngine, config: Config = None):
        self.config = config or Config.load(environ={})
        self.router = EventRouter()
        self.controller = SessionController(
            engine,
            config=self.config.recognition,
            policies=self.config.policies,
        )
        self.bridge = EventBridge(self.controller, self.router)
        self.bridge.attach()
        logger.info(f"SpeechRecognizer ready for session {self.session_id}")

    @property
    def session_id(self) -> str:
        return self.controller.session.session_id

    def subscribe(self, event: DomainEvent, handler: EventHandler) -> "SpeechRecognizer":
        self.router.subscribe(event, handler)
        return self

    def unsubscribe(self, event: DomainEvent, handler: EventHandler) -> bool:
        return self.router.unsubscribe(event, handler)

    def close(self):
        """Release the engine's callback slots."""
        self.bridge.detach()

    def start(self):
        self.controller.start()

    def stop(self):
        self.controller.stop()

    def abort(self):
        self.controller.abort()

    def is_in_progress(self) -> bool:
        return self.controller.is_in_progress()

    def get_final_transcript(self) -> str:
        return self.controller.get_final_transcript()

    def get_current_transcript(self) -> str:
        return self.controller.get_current_transcript()

    def get_audio_duration(self) -> float:
        return self.controller.get_audio_duration()

    def get_sound_duration(self) -> float:
        return self.controller.get_sound_duration()

    def get_speech_duration(self) -> float:
        return self.controller.get_speech_duration()

    def get_duration(self) -> float:
        return self.controller.get_duration()

    @property
    def results(self) -> ResultLog:
        return self.controller.results

    def get_transcript_history(self, max_items: Optional[int] = None) -> List[str]:
        return self.controller.get_transcript_history(max_items)

    def reset(self):
        self.controller.reset()
