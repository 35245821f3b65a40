# automata_lab/utils/logging_config.py

import logging
import logging.config
import time
from pathlib import Path
from typing import Optional

from automata_lab.config import AutomataConfig

def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_performance: bool = False
) -> None:
    """
    Set up logging configuration for the automata construction engine.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        enable_console: Whether to enable console logging
        enable_performance: Whether to enable detailed performance logging
    """

    # Create logs directory if it doesn't exist
    if log_file:
        log_dir = Path(log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'detailed': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'simple': {
                'format': '%(levelname)s - %(name)s - %(message)s'
            },
            'performance': {
                'format': '%(asctime)s - PERF - %(name)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {},
        'loggers': {
            'automata_lab': {
                'level': log_level,
                'handlers': [],
                'propagate': True
            },
            'automata_lab.performance': {
                'level': 'DEBUG' if enable_performance else 'WARNING',
                'handlers': [],
                'propagate': False
            }
        }
    }

    if enable_console:
        config['handlers']['console'] = {
            'class': 'logging.StreamHandler',
            'level': log_level,
            'formatter': 'simple',
            'stream': 'ext://sys.stderr'
        }
        config['loggers']['automata_lab']['handlers'].append('console')
        config['loggers']['automata_lab']['propagate'] = False

    if log_file:
        config['handlers']['file'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': 'DEBUG',
            'formatter': 'detailed',
            'filename': log_file,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 5,
            'encoding': 'utf8'
        }
        config['loggers']['automata_lab']['handlers'].append('file')

    # Timings go next to the main log file, or to stderr when there is none
    if enable_performance and log_file:
        config['handlers']['performance'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': 'DEBUG',
            'formatter': 'performance',
            'filename': str(Path(log_file).with_name(Path(log_file).stem + '_performance.log')),
            'maxBytes': 10485760,  # 10MB
            'backupCount': 3,
            'encoding': 'utf8'
        }
        config['loggers']['automata_lab.performance']['handlers'].append('performance')
    elif enable_performance:
        config['handlers']['performance'] = {
            'class': 'logging.StreamHandler',
            'level': 'DEBUG',
            'formatter': 'performance',
            'stream': 'ext://sys.stderr'
        }
        config['loggers']['automata_lab.performance']['handlers'].append('performance')

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name == "automata_lab" or name.startswith("automata_lab."):
        return logging.getLogger(name)
    return logging.getLogger(f"automata_lab.{name}")


def get_performance_logger() -> logging.Logger:
    """
    Get a logger instance for performance metrics.

    Returns:
        Performance logger instance
    """
    return logging.getLogger("automata_lab.performance")


class PerformanceTimer:
    """Context manager for timing operations and logging performance metrics."""

    def __init__(self, operation_name: str, logger: Optional[logging.Logger] = None):
        self.operation_name = operation_name
        self.logger = logger or get_performance_logger()
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time

        if exc_type is None:
            self.logger.info(f"{self.operation_name} completed in {self.duration:.4f}s")
        else:
            self.logger.warning(f"{self.operation_name} failed after {self.duration:.4f}s: {exc_val}")


def configure_logging(config: AutomataConfig, log_file: Optional[str] = None,
                      enable_console: bool = True) -> None:
    """
    Apply the logging settings of an ``AutomataConfig``.

    Args:
        config: Configuration whose ``log_level`` and
            ``enable_performance_logging`` are applied
        log_file: Optional path to log file
        enable_console: Whether to enable console logging
    """
    setup_logging(
        log_level=config.log_level,
        log_file=log_file,
        enable_console=enable_console,
        enable_performance=config.enable_performance_logging
    )


def init_default_logging(config: Optional[AutomataConfig] = None) -> bool:
    """
    Initialize default logging from ``AUTOMATA_LAB_*`` environment variables
    if the host application has not configured any handlers.

    Returns:
        bool: Whether logging was configured
    """
    if logging.getLogger().handlers or logging.getLogger("automata_lab").handlers:
        return False

    configure_logging(config or AutomataConfig.from_env())
    return True


# Auto-initialize on import
init_default_logging()
