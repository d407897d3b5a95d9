# events/events.py
from dataclasses import dataclass, field
from typing import Dict

from core.event_bus import Event
from routines.models import RoutineDefinition

@dataclass
class RoutineSaved(Event):
    name: str                       # key the routine was written under
    definition: RoutineDefinition   # exactly what the registry received

@dataclass
class RoutineRemoved(Event):
    name: str

@dataclass
class RoutinesLoaded(Event):
    routines: Dict[str, RoutineDefinition] = field(default_factory=dict)

@dataclass
class RoutinesChanged(Event):
    """Emitted after every cache mutation with a fresh snapshot for rendering."""
    routines: Dict[str, RoutineDefinition] = field(default_factory=dict)
