import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence

from earshot.core.config import RecognitionConfig
from earshot.interfaces.engine import EngineResult

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class RecognitionHypothesis:
    """One candidate reading of an utterance."""
    transcript: str
    confidence: float
    is_final: bool
    timestamp: float
    is_most_confident: bool

class ResultLog:
    """
    Append-only record of committed hypotheses, in the order they were accepted.
    Lives as long as the session object that owns it and may span many result events.
    """

    def __init__(self):
        self._entries: List[RecognitionHypothesis] = []

    def append(self, hypothesis: RecognitionHypothesis):
        self._entries.append(hypothesis)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RecognitionHypothesis]:
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def most_confident(self) -> List[RecognitionHypothesis]:
        return [h for h in self._entries if h.is_most_confident]

    def final(self) -> List[RecognitionHypothesis]:
        return [h for h in self._entries if h.is_final]

    def transcript(self) -> str:
        """Concatenated text of every most-confident entry."""
        return "".join(h.transcript for h in self._entries if h.is_most_confident)

@dataclass
class AggregationResult:
    accepted: List[RecognitionHypothesis] = field(default_factory=list)  # every hypothesis seen, unfiltered
    committed: List[RecognitionHypothesis] = field(default_factory=list)
    transcript: str = ""

class ResultAggregator:
    """
    Filters the hypotheses of each result event and commits the survivors to a ResultLog.
    """

    def __init__(self, log: ResultLog = None):
        self.log = log if log is not None else ResultLog()

    def process_result_event(self, groups: Sequence[EngineResult], event_timestamp: float,
                             config: RecognitionConfig) -> AggregationResult:
        """
        Process the result groups of one engine result event.

        A hypothesis is committed when its group is loggable (log_final_only is off,
        or the group is final) and its confidence reaches minimum_confidence_level.
        The transcript is the concatenation of committed index-0 alternatives, in group order.

        Args:
            groups: Result groups as delivered by the engine (never re-sorted)
            event_timestamp: Timestamp of the originating engine event
            config: Supplies log_final_only and minimum_confidence_level

        Returns:
            AggregationResult with raw hypotheses, committed ones and the new transcript
        """
        outcome = AggregationResult()
        parts: List[str] = []

        for group in groups:
            loggable = not (config.log_final_only and not group.is_final)

            for index, alternative in enumerate(group.alternatives):
                hypothesis = RecognitionHypothesis(
                    transcript=alternative.transcript,
                    confidence=alternative.confidence,
                    is_final=group.is_final,
                    timestamp=event_timestamp,
                    is_most_confident=index == 0,
                )
                outcome.accepted.append(hypothesis)

                if not 0.0 <= hypothesis.confidence <= 1.0:
                    logger.warning(f"Confidence out of range: {hypothesis.confidence}",
                                   extra={"confidence": hypothesis.confidence})

                if loggable and hypothesis.confidence >= config.minimum_confidence_level:
                    self.log.append(hypothesis)
                    outcome.committed.append(hypothesis)
                    if hypothesis.is_most_confident:
                        parts.append(hypothesis.transcript)

        outcome.transcript = "".join(parts)
        logger.debug(f"Processed result event: {len(outcome.accepted)} hypotheses, "
                     f"{len(outcome.committed)} committed",
                     extra={"accepted": len(outcome.accepted), "committed": len(outcome.committed)})
        return outcome
