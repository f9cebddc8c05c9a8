"""Typed notifications published by the sync scheduler.

Consumers subscribe to an event class on the scheduler's EventChannel.
Delivery is synchronous on the emitting thread; a failing subscriber is
logged and never interrupts the emitter or the other subscribers.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List, Type, TypeVar

from wikipages.file_mapper.models import ContentUnit

logger = logging.getLogger(__name__)


class Event:
    """Base class for all scheduler notifications."""
    pass


@dataclass(frozen=True)
class Ready(Event):
    """Login succeeded; runs may start."""


@dataclass(frozen=True)
class RunningStarted(Event):
    """A run has started."""


@dataclass(frozen=True)
class RunningEnded(Event):
    """A run has finished and the cache is persisted."""


@dataclass(frozen=True)
class LoginError(Event):
    error: Exception


@dataclass(frozen=True)
class MiddlewareError(Event):
    unit: ContentUnit
    error: Exception


@dataclass(frozen=True)
class EditError(Event):
    unit: ContentUnit
    error: Exception


@dataclass(frozen=True)
class CreateError(Event):
    unit: ContentUnit
    error: Exception


E = TypeVar('E', bound=Event)


class EventChannel:
    """Observer registry keyed by event class.

    Example:
        >>> channel = EventChannel()
        >>> channel.subscribe(EditError, lambda event: print(event.error))
        >>> channel.emit(EditError(unit=unit, error=error))
    """

    def __init__(self):
        self._subscribers: DefaultDict[Type[Event], List[Callable[[Event], None]]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[E], callback: Callable[[E], None]) -> Callable[[], None]:
        """Register ``callback`` for ``event_type``.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers[event_type].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers[event_type]:
                    self._subscribers[event_type].remove(callback)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Deliver ``event`` to the subscribers of its class."""
        with self._lock:
            callbacks = list(self._subscribers.get(type(event), ()))

        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception(f"Subscriber for {type(event).__name__} failed")
