# routines/messages.py
"""
Request types understood by the extension's message endpoint.

Every request is a small frozen dataclass with a fixed `type` tag; the union
`Message` is closed, so clients only ever send one of these three shapes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from routines.models import RoutineDefinition


@dataclass(frozen=True)
class ParseUtterance:
    utterance: str
    disable_fallback: bool = True

    type = "parseUtterance"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "utterance": self.utterance,
            "disableFallback": self.disable_fallback,
        }


@dataclass(frozen=True)
class GetRegisteredNicknames:
    type = "getRegisteredNicknames"

    def to_payload(self) -> Dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True)
class RegisterNickname:
    name: str
    context: Optional[RoutineDefinition]   # None deletes the entry

    type = "registerNickname"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "context": self.context.to_dict() if self.context is not None else None,
        }


Message = Union[ParseUtterance, GetRegisteredNicknames, RegisterNickname]
