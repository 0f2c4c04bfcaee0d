import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from earshot.core.exceptions import ConfigurationError
from earshot.orchestrator.policies import Policies, StartPolicy

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

@dataclass
class LoggingConfig:
    level: str = "INFO"

    def __post_init__(self):
        self.level = str(self.level).upper()
        if self.level not in _LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.level}")

@dataclass
class RecognitionConfig:
    # Forwarded to the engine
    continuous: bool = False
    interim_results: bool = False
    lang: Optional[str] = None
    max_alternatives: int = 1
    service_uri: Optional[str] = None
    grammars: Optional[Any] = None # Not interpreted by any engine yet

    # Consumed locally
    minimum_confidence_level: float = 0.5
    log_final_only: bool = False
    chain_transcripts: bool = False

    def __post_init__(self):
        for name in ("continuous", "interim_results", "log_final_only", "chain_transcripts"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} must be a boolean, got {getattr(self, name)!r}")
        for name in ("lang", "service_uri"):
            if getattr(self, name) is not None and not isinstance(getattr(self, name), str):
                raise ConfigurationError(f"{name} must be a string or None, got {getattr(self, name)!r}")
        if isinstance(self.minimum_confidence_level, bool) or not isinstance(self.minimum_confidence_level, (int, float)):
            raise ConfigurationError(
                f"minimum_confidence_level must be a number, got {self.minimum_confidence_level!r}"
            )
        if not 0.0 <= self.minimum_confidence_level <= 1.0:
            raise ConfigurationError(
                f"minimum_confidence_level must be within [0, 1], got {self.minimum_confidence_level}"
            )
        if isinstance(self.max_alternatives, bool) or not isinstance(self.max_alternatives, int) or self.max_alternatives < 1:
            raise ConfigurationError(f"max_alternatives must be a positive integer, got {self.max_alternatives!r}")

    def engine_settings(self) -> dict:
        """Subset of the configuration the recognition engine understands."""
        return {
            "continuous": self.continuous,
            "interim_results": self.interim_results,
            "lang": self.lang,
            "max_alternatives": self.max_alternatives,
            "service_uri": self.service_uri,
            "grammars": self.grammars,
        }

def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")

def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None

def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None

def _parse_start_policy(name: str, raw: str) -> StartPolicy:
    try:
        return StartPolicy[raw.strip().upper()]
    except KeyError:
        raise ConfigurationError(f"{name} must be one of {[p.name for p in StartPolicy]}, got {raw!r}") from None

# env var -> (section, field, parser)
_ENV_VARS = {
    "EARSHOT_LOG_LEVEL": ("logging", "level", lambda name, raw: raw),
    "EARSHOT_CONTINUOUS": ("recognition", "continuous", _parse_bool),
    "EARSHOT_INTERIM_RESULTS": ("recognition", "interim_results", _parse_bool),
    "EARSHOT_LANG": ("recognition", "lang", lambda name, raw: raw or None),
    "EARSHOT_MAX_ALTERNATIVES": ("recognition", "max_alternatives", _parse_int),
    "EARSHOT_SERVICE_URI": ("recognition", "service_uri", lambda name, raw: raw or None),
    "EARSHOT_MIN_CONFIDENCE": ("recognition", "minimum_confidence_level", _parse_float),
    "EARSHOT_LOG_FINAL_ONLY": ("recognition", "log_final_only", _parse_bool),
    "EARSHOT_CHAIN_TRANSCRIPTS": ("recognition", "chain_transcripts", _parse_bool),
    "EARSHOT_START_POLICY": ("policies", "start_policy", _parse_start_policy),
}

@dataclass
class Config:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    policies: Policies = field(default_factory=Policies)

    @classmethod
    def load(cls, overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
             environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build a configuration from EARSHOT_* environment variables, then apply overrides.

        Args:
            overrides: {"recognition": {...}, "logging": {...}, "policies": {...}}
            environ: Environment mapping, defaults to os.environ

        Raises:
            ConfigurationError: on unknown sections/fields or invalid values
        """
        environ = os.environ if environ is None else environ
        sections: dict = {"logging": {}, "recognition": {}, "policies": {}}

        for var, (section, name, parser) in _ENV_VARS.items():
            if var in environ:
                sections[section][name] = parser(var, environ[var])

        for section, values in (overrides or {}).items():
            if section not in sections:
                raise ConfigurationError(f"Unknown configuration section: {section}")
            sections[section].update(values)

        config = cls()
        for section, values in sections.items():
            if not values:
                continue
            current = getattr(config, section)
            known = {f.name for f in fields(current)}
            unknown = set(values) - known
            if unknown:
                raise ConfigurationError(f"Unknown {section} option(s): {sorted(unknown)}")
            # replace() builds a new instance, so __post_init__ validates the merged values
            setattr(config, section, replace(current, **values))
        return config
