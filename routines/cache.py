# routines/cache.py

import logging
from typing import Dict, Iterator, Mapping, Optional

from core.event_bus import EventBus
from events.events import RoutineRemoved, RoutineSaved, RoutinesChanged, RoutinesLoaded
from routines.models import RoutineDefinition

logger = logging.getLogger(__name__)


class LocalCache:
    """
    In-memory read model of the registry, used for rendering.

    Only the synchronizer writes to it, and only after the registry
    acknowledged the matching write. Every mutation is announced on the bus:
    the specific event first, then RoutinesChanged with a full snapshot.
    """

    def __init__(self, bus: Optional[EventBus] = None):
        self.bus = bus or EventBus()
        self._routines: Dict[str, RoutineDefinition] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._routines

    def __len__(self) -> int:
        return len(self._routines)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._routines))

    def get(self, name: str) -> Optional[RoutineDefinition]:
        return self._routines.get(name)

    def snapshot(self) -> Dict[str, RoutineDefinition]:
        return dict(self._routines)

    def replace_all(self, routines: Mapping[str, RoutineDefinition]):
        self._routines = dict(routines)
        logger.info("Loaded %d routines", len(self._routines))
        self.bus.emit(RoutinesLoaded(routines=self.snapshot()))
        self._changed()

    def put(self, name: str, definition: RoutineDefinition):
        self._routines[name] = definition
        self.bus.emit(RoutineSaved(name=name, definition=definition))
        self._changed()

    def discard(self, name: str) -> bool:
        """Drop a routine. Returns False (and stays silent) if it was not cached."""
        if self._routines.pop(name, None) is None:
            return False
        self.bus.emit(RoutineRemoved(name=name))
        self._changed()
        return True

    def _changed(self):
        self.bus.emit(RoutinesChanged(routines=self.snapshot()))
