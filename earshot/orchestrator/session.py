import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

from earshot.orchestrator.results import ResultLog

@dataclass
class Session:
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    final_transcript: str = ""
    interim_transcript: str = ""
    results: ResultLog = field(default_factory=ResultLog)
    transcript_history: List[str] = field(default_factory=list)  # final transcript after each end

    def commit(self, chain: bool) -> str:
        """
        Fold the interim transcript into the final one at session end.

        With chaining the interim text is appended after a single space,
        even when the final transcript is still empty.
        """
        if chain:
            self.final_transcript = self.final_transcript + " " + self.interim_transcript
        else:
            self.final_transcript = self.interim_transcript
        self.transcript_history.append(self.final_transcript)
        return self.final_transcript

    def get_history(self, max_items: int = None) -> List[str]:
        """
        Get committed transcripts, optionally limited to the most recent ones.

        Args:
            max_items: Maximum number of entries to return (most recent). None = all.
        """
        if max_items is None:
            return self.transcript_history.copy()
        if max_items <= 0:
            return []
        return self.transcript_history[-max_items:]

    def clear_transcripts(self):
        """Forget final, interim and historic transcripts. The result log is kept."""
        self.final_transcript = ""
        self.interim_transcript = ""
        self.transcript_history.clear()
