from dataclasses import dataclass
from enum import Enum, auto

from earshot.core.exceptions import ConfigurationError

class StartPolicy(Enum):
    IGNORE = auto()  # keep the running session, log and drop the request
    REJECT = auto()  # raise RecognitionStateError
    RESTART = auto() # abort the running session, then start a new one

@dataclass
class Policies:
    # What start() does while a session is already recognizing
    start_policy: StartPolicy = StartPolicy.IGNORE

    def __post_init__(self):
        if isinstance(self.start_policy, str):
            try:
                self.start_policy = StartPolicy[self.start_policy.strip().upper()]
            except KeyError:
                raise ConfigurationError(
                    f"start_policy must be one of {[p.name for p in StartPolicy]}, got {self.start_policy!r}"
                ) from None
        if not isinstance(self.start_policy, StartPolicy):
            raise ConfigurationError(f"start_policy must be a StartPolicy, got {self.start_policy!r}")
