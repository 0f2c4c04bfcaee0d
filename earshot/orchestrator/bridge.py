import logging
from typing import Callable, Dict

from earshot.interfaces.engine import ABCRecognitionEngine, EngineEvent, EngineSignal
from earshot.orchestrator.durations import Window
from earshot.orchestrator.events import (
    DomainEvent,
    ErrorEvent,
    LifecycleEvent,
    NoMatchEvent,
    ResultEvent,
)
from earshot.orchestrator.fsm import SessionController
from earshot.orchestrator.router import EventRouter

logger = logging.getLogger(__name__)

# Phase signals: (window, is_start, domain event)
_PHASES = {
    EngineSignal.AUDIO_START: (Window.AUDIO, True, DomainEvent.AUDIO_START),
    EngineSignal.AUDIO_END: (Window.AUDIO, False, DomainEvent.AUDIO_END),
    EngineSignal.SOUND_START: (Window.SOUND, True, DomainEvent.SOUND_START),
    EngineSignal.SOUND_END: (Window.SOUND, False, DomainEvent.SOUND_END),
    EngineSignal.SPEECH_START: (Window.SPEECH, True, DomainEvent.SPEECH_START),
    EngineSignal.SPEECH_END: (Window.SPEECH, False, DomainEvent.SPEECH_END),
}

class EventBridge:
    """Routes engine callbacks into the controller and re-emits them as domain events."""

    def __init__(self, controller: SessionController, router: EventRouter):
        self.controller = controller
        self.router = router
        self._callbacks: Dict[EngineSignal, Callable[[EngineEvent], None]] = {
            EngineSignal.START: self.on_start,
            EngineSignal.END: self.on_end,
            EngineSignal.RESULT: self.on_result,
            EngineSignal.NO_MATCH: self.on_no_match,
            EngineSignal.ERROR: self.on_error,
        }
        for signal in _PHASES:
            self._callbacks[signal] = self._phase_callback(signal)

    @property
    def session_id(self) -> str:
        return self.controller.session.session_id

    def attach(self, engine: ABCRecognitionEngine = None):
        engine = engine or self.controller.engine
        for signal, callback in self._callbacks.items():
            engine.on(signal, callback)

    def detach(self, engine: ABCRecognitionEngine = None):
        engine = engine or self.controller.engine
        for signal in self._callbacks:
            engine.on(signal, None)

    def on_start(self, e: EngineEvent):
        self.controller.handle_start(e.timestamp)
        self.router.dispatch(DomainEvent.START, LifecycleEvent(
            session_id=self.session_id,
            timestamp=e.timestamp,
            duration=self.controller.durations.snapshot(Window.SESSION),
            original=e,
        ))

    def on_end(self, e: EngineEvent):
        self.controller.handle_end(e.timestamp)
        self.router.dispatch(DomainEvent.END, LifecycleEvent(
            session_id=self.session_id,
            timestamp=e.timestamp,
            duration=self.controller.durations.snapshot(Window.SESSION),
            original=e,
        ))

    def on_result(self, e: EngineEvent):
        outcome = self.controller.handle_result(e.results, e.timestamp)
        self.router.dispatch(DomainEvent.RESULT, ResultEvent(
            session_id=self.session_id,
            timestamp=e.timestamp,
            transcript=outcome.transcript,
            results=self.controller.results,
            raw_results=outcome.accepted,
            original=e,
        ))

    def on_no_match(self, e: EngineEvent):
        logger.info("Engine reported no match")
        self.router.dispatch(DomainEvent.NO_MATCH, NoMatchEvent(
            session_id=self.session_id,
            timestamp=e.timestamp,
            original=e,
        ))

    def on_error(self, e: EngineEvent):
        logger.warning(f"Engine error: {e.error} {e.message or ''}".rstrip(),
                       extra={"error_kind": e.error})
        self.router.dispatch(DomainEvent.ERROR, ErrorEvent(
            session_id=self.session_id,
            timestamp=e.timestamp,
            error=e.error,
            message=e.message,
            original=e,
        ))

    def _phase_callback(self, signal: EngineSignal) -> Callable[[EngineEvent], None]:
        window, is_start, event = _PHASES[signal]

        def callback(e: EngineEvent):
            if is_start:
                self.controller.handle_phase_start(window, e.timestamp)
            else:
                self.controller.handle_phase_end(window, e.timestamp)
            self.router.dispatch(event, LifecycleEvent(
                session_id=self.session_id,
                timestamp=e.timestamp,
                duration=self.controller.durations.snapshot(window),
                original=e,
            ))

        return callback
