"""Sync scheduling for wikipages.

This package holds the run configuration, the fingerprint cache, the
notification channel and the SyncScheduler that ties them together.
"""

from .change_cache import ChangeCache, fingerprint, should_write
from .config_loader import ConfigLoader, DEFAULT_PROJECT_FILE
from .errors import (
    SchedulerError,
    ConfigurationError,
    NotReadyError,
    SourceMissingError,
    RemoteWriteError,
    ConfigError,
)
from .events import (
    Event,
    EventChannel,
    Ready,
    RunningStarted,
    RunningEnded,
    LoginError,
    MiddlewareError,
    EditError,
    CreateError,
)
from .models import CacheRetention, RunConfiguration, RunResult, SchedulerState
from .scheduler import SyncScheduler

__all__ = [
    'SyncScheduler',
    'RunConfiguration',
    'RunResult',
    'SchedulerState',
    'CacheRetention',
    'ChangeCache',
    'fingerprint',
    'should_write',
    'ConfigLoader',
    'DEFAULT_PROJECT_FILE',
    'Event',
    'EventChannel',
    'Ready',
    'RunningStarted',
    'RunningEnded',
    'LoginError',
    'MiddlewareError',
    'EditError',
    'CreateError',
    'SchedulerError',
    'ConfigurationError',
    'NotReadyError',
    'SourceMissingError',
    'RemoteWriteError',
    'ConfigError',
]
