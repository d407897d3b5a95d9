# routines/offline.py
"""In-memory stand-ins for the registry and interpreter, used when `dev_offline` is set."""

import logging
from typing import Dict, List, Optional, Tuple

from routines.models import IntentContext, RoutineDefinition

logger = logging.getLogger(__name__)


class OfflineRegistry:
    """Dict-backed registry. Entries are stored in wire form, like the real store."""

    def __init__(self, routines: Optional[Dict[str, RoutineDefinition]] = None):
        self._store: Dict[str, dict] = {}
        self.writes: List[Tuple[str, Optional[dict]]] = []
        for name, definition in (routines or {}).items():
            self._store[name] = definition.to_dict()

    async def fetch_all(self) -> Dict[str, RoutineDefinition]:
        return {name: RoutineDefinition.from_dict(entry, name=name)
                for name, entry in self._store.items()}

    async def upsert(self, name: str, definition: RoutineDefinition) -> None:
        entry = definition.to_dict()
        self.writes.append((name, entry))
        self._store[name] = entry

    async def remove(self, name: str) -> None:
        self.writes.append((name, None))
        self._store.pop(name, None)


class OfflineParser:
    """Accepts every line except the ones listed in `rejected`."""

    def __init__(self, rejected=()):
        self.rejected = {r.lower() for r in rejected}
        self.calls: List[str] = []

    async def parse(self, utterance: str) -> Optional[IntentContext]:
        self.calls.append(utterance)
        if utterance.lower() in self.rejected:
            return None
        return IntentContext(utterance=utterance.lower(), extra={"name": "offline.echo"})
