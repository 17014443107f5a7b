# shaderlab/core/events.py
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type, TypeVar

E = TypeVar("E")


class Event:
    """Base class for all Events."""

    pass


@dataclass(frozen=True)
class PropertyChanged(Event):
    """Emitted by an observable object when one of its properties changes."""

    sender: Any
    property_name: str


Listener = Callable[[Any], None]


class EventManager:
    """
    Per-owner event channel.

    Events are queued by type for hosts that poll once per frame, and are
    also pushed immediately to any subscribed listeners.
    """

    def __init__(self):
        self._queues: Dict[Type[Any], List[Any]] = defaultdict(list)
        self._listeners: List[Listener] = []

    def emit(self, event: Any) -> None:
        event_type = type(event)
        self._queues[event_type].append(event)
        for listener in list(self._listeners):
            listener(event)

    def get(self, event_type: Type[E]) -> List[E]:
        if event_type in self._queues:
            events = self._queues[event_type]
            self._queues[event_type] = []
            return events
        return []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def clear_all(self) -> None:
        self._queues.clear()
