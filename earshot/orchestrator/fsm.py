import logging
from typing import List, Optional, Sequence

from earshot.core.config import RecognitionConfig
from earshot.core.exceptions import ConfigurationError, EngineError, RecognitionStateError
from earshot.core.logging import enter_session, get_session_id, leave_session, set_session_id
from earshot.interfaces.engine import ABCRecognitionEngine, EngineResult
from earshot.orchestrator.durations import DurationTracker, Window
from earshot.orchestrator.policies import Policies, StartPolicy
from earshot.orchestrator.results import AggregationResult, ResultAggregator, ResultLog
from earshot.orchestrator.session import Session
from earshot.orchestrator.state import SessionState

logger = logging.getLogger(__name__)

class SessionController:
    """
    Owns the recognizing/idle state of one recognition session object and
    forwards start/stop/abort to the engine. Commits the interim transcript
    into the final transcript when the engine reports the end of a session.
    """

    def __init__(self, engine: ABCRecognitionEngine, config: RecognitionConfig = None,
                 policies: Policies = None, session: Session = None):
        self.engine = engine
        self.config = config or RecognitionConfig()
        self.policies = policies or Policies()
        self.session = session or Session()
        self.durations = DurationTracker()
        self.aggregator = ResultAggregator(self.session.results)
        self.state = SessionState.IDLE
        self._session_token = None

        self.engine.configure(self.config.engine_settings())

    def transition(self, new_state: SessionState):
        if self.state == new_state:
            return

        old_state = self.state
        self.state = new_state
        logger.info(f"Session transition: {old_state.name} -> {new_state.name}",
                    extra={"old_state": old_state.name, "new_state": new_state.name})

    # Commands

    def start(self):
        """Begin a recognition session."""
        if self.state == SessionState.RECOGNIZING:
            policy = self.policies.start_policy
            if policy == StartPolicy.REJECT:
                raise RecognitionStateError("Recognition already in progress")
            elif policy == StartPolicy.IGNORE:
                logger.warning("start() ignored: recognition already in progress")
                return
            elif policy == StartPolicy.RESTART:
                logger.info("Restarting recognition session")
                self.abort()
            else:
                raise ConfigurationError(f"Unknown start policy: {policy!r}")

        self._session_token = enter_session(self.session.session_id)
        self.transition(SessionState.RECOGNIZING)
        try:
            self.engine.start()
        except Exception as e:
            self.transition(SessionState.IDLE)
            self._leave_session()
            raise EngineError(f"Engine failed to start: {e}") from e

    def stop(self):
        """Gracefully end the session; the engine is expected to report end afterwards."""
        self.transition(SessionState.IDLE)
        try:
            self._forward("stop", self.engine.stop)
        finally:
            self._leave_session()

    def abort(self):
        """Shut the session down immediately; an end report may or may not follow."""
        self.transition(SessionState.IDLE)
        try:
            self._forward("abort", self.engine.abort)
        finally:
            self._leave_session()

    def _forward(self, name: str, command):
        try:
            command()
        except Exception as e:
            raise EngineError(f"Engine failed to {name}: {e}") from e

    def _leave_session(self):
        if self._session_token is None:
            return
        token, self._session_token = self._session_token, None
        try:
            leave_session(token)
        except ValueError:
            # Token was created in another context
            if get_session_id() == self.session.session_id:
                set_session_id(None)

    # Queries

    def is_in_progress(self) -> bool:
        return self.state == SessionState.RECOGNIZING

    def get_final_transcript(self) -> str:
        return self.session.final_transcript

    def get_current_transcript(self) -> str:
        return self.session.interim_transcript

    def get_audio_duration(self) -> float:
        return self.durations.elapsed(Window.AUDIO)

    def get_sound_duration(self) -> float:
        return self.durations.elapsed(Window.SOUND)

    def get_speech_duration(self) -> float:
        return self.durations.elapsed(Window.SPEECH)

    def get_duration(self) -> float:
        """Seconds between the engine's start and end reports."""
        return self.durations.elapsed(Window.SESSION)

    @property
    def results(self) -> ResultLog:
        return self.session.results

    def get_transcript_history(self, max_items: Optional[int] = None) -> List[str]:
        return self.session.get_history(max_items)

    def reset(self):
        """Clear transcripts and duration windows between sessions."""
        if self.is_in_progress():
            raise RecognitionStateError("Cannot reset while recognition is in progress")
        self.session.clear_transcripts()
        self.durations.reset()

    # Engine reports

    def handle_start(self, timestamp: float):
        self.durations.mark_start(Window.SESSION, timestamp)

    def handle_end(self, timestamp: float) -> str:
        self.durations.mark_end(Window.SESSION, timestamp)
        self.transition(SessionState.IDLE)
        final = self.session.commit(self.config.chain_transcripts)
        logger.info(f"Session ended after {self.get_duration():.2f}s",
                    extra={"chained": self.config.chain_transcripts, "final_length": len(final)})
        self._leave_session()
        return final

    def handle_phase_start(self, window: Window, timestamp: float):
        self.durations.mark_start(window, timestamp)

    def handle_phase_end(self, window: Window, timestamp: float):
        self.durations.mark_end(window, timestamp)

    def handle_result(self, groups: Sequence[EngineResult], timestamp: float) -> AggregationResult:
        outcome = self.aggregator.process_result_event(groups, timestamp, self.config)
        self.session.interim_transcript = outcome.transcript
        return outcome
