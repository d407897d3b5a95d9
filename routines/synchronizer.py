# routines/synchronizer.py

import logging
from typing import Dict, Optional, Protocol, Union

from core.event_bus import EventBus
from routines.cache import LocalCache
from routines.errors import RoutineValidationError
from routines.models import RoutineDefinition, RoutineDraft
from routines.validator import UtteranceParser, validate

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SaveResult = Union[bool, Dict[str, object]]


class Registry(Protocol):
    async def fetch_all(self) -> Dict[str, RoutineDefinition]: ...
    async def upsert(self, name: str, definition: RoutineDefinition) -> None: ...
    async def remove(self, name: str) -> None: ...


class RoutineSynchronizer:
    """
    Keeps the local routine cache in step with the remote registry across
    create, update, rename and delete.

    One instance per session; the registry and parser are injected.
    """

    def __init__(self,
                 registry: Registry,
                 parser: UtteranceParser,
                 cache: Optional[LocalCache] = None,
                 bus: Optional[EventBus] = None):
        self.registry = registry
        self.parser = parser
        if cache is not None and bus is not None and cache.bus is not bus:
            raise ValueError("pass either a cache or a bus, the cache already owns its bus")
        self.cache = cache if cache is not None else LocalCache(bus)

    @property
    def bus(self) -> EventBus:
        return self.cache.bus

    @property
    def registered_nicknames(self) -> Dict[str, RoutineDefinition]:
        """Current cache snapshot, name -> routine."""
        return self.cache.snapshot()

    async def load(self) -> Dict[str, RoutineDefinition]:
        """Seed the cache from a full registry fetch."""
        routines = await self.registry.fetch_all()
        self.cache.replace_all(routines)
        return self.cache.snapshot()

    async def update_nickname(self,
                              candidate: Optional[RoutineDraft],
                              previous_name: Optional[str] = None) -> SaveResult:
        """
        Save `candidate` and/or drop `previous_name`.

        - candidate only: create
        - candidate with previous_name == candidate.nickname: update in place
        - candidate with a different previous_name: rename
        - previous_name only: delete

        Returns True, or {"allowed": False, "error": message} when the draft
        does not validate. Nothing is written in that case. Transport errors
        propagate.
        """
        # always validate against the registry, the cache may be stale
        existing = await self.registry.fetch_all()

        if candidate is not None:
            try:
                definition = await validate(candidate, existing.keys(), self.parser,
                                            previous_name=previous_name)
            except RoutineValidationError as e:
                logger.error(e.message)
                return {"allowed": False, "error": e.message}

            await self.registry.upsert(candidate.nickname, definition)
            self.cache.put(candidate.nickname, definition)

        if previous_name is not None and (candidate is None or candidate.nickname != previous_name):
            await self._delete(previous_name)

        return True

    async def _delete(self, name: str):
        # sent even if absent from the fetch; removing a missing key is a no-op
        await self.registry.remove(name)
        self.cache.discard(name)
