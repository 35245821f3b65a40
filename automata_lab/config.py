# automata_lab/config.py

import os
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

ENV_PREFIX = "AUTOMATA_LAB_"

@dataclass(frozen=True)
class AutomataConfig:
    """Configuration for regex parsing and automaton construction"""
    end_marker: str = "#"
    epsilon_symbol: str = "ε"
    ignore_whitespace: bool = True
    log_level: str = "WARNING"
    enable_performance_logging: bool = False
    custom_settings: Dict[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if len(self.end_marker) != 1:
            raise ValueError(f"End marker must be a single character, got '{self.end_marker}'")
        if self.end_marker in "()|*+?":
            raise ValueError(f"End marker cannot be an operator character: '{self.end_marker}'")

    def get_setting(self, key: str, default=None):
        return self.custom_settings.get(key, default)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AutomataConfig":
        """
        Build a configuration from ``AUTOMATA_LAB_*`` environment variables.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``

        Returns:
            AutomataConfig with environment overrides applied
        """
        env = os.environ if environ is None else environ

        def flag(name: str, default: bool) -> bool:
            value = env.get(ENV_PREFIX + name)
            if value is None:
                return default
            return value.strip().lower() in ("1", "true", "yes", "on")

        return cls(
            end_marker=env.get(ENV_PREFIX + "END_MARKER", cls.end_marker),
            epsilon_symbol=env.get(ENV_PREFIX + "EPSILON_SYMBOL", cls.epsilon_symbol),
            ignore_whitespace=flag("IGNORE_WHITESPACE", cls.ignore_whitespace),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", cls.log_level).upper(),
            enable_performance_logging=flag("ENABLE_PERFORMANCE_LOGGING", cls.enable_performance_logging),
        )


_default_config: Optional[AutomataConfig] = None

def get_config() -> AutomataConfig:
    """Return the process-wide default configuration, loading it from the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = AutomataConfig.from_env()
    return _default_config
