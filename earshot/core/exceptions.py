class EarshotError(Exception):
    """Base exception for all application errors."""
    pass

class ConfigurationError(EarshotError):
    pass

class EngineError(EarshotError):
    """A command forwarded to the recognition engine failed."""
    pass

class RecognitionStateError(EarshotError):
    """An operation is not allowed in the current session state."""
    pass

class ScriptError(EarshotError):
    """A replay script could not be parsed."""
    pass
