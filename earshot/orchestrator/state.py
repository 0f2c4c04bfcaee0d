from enum import Enum, auto

class SessionState(Enum):
    IDLE = auto()
    RECOGNIZING = auto()
