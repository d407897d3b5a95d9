# routines/models.py

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ROUTINE_UTTERANCE_PREFIX = "Combined actions named "


@dataclass(frozen=True)
class IntentContext:
    """
    One parsed voice command, as returned by the interpreter.

    Only `utterance`, `slots` and `parameters` are interpreted here; any other
    keys the interpreter sends (intent name, fallback flags...) are kept in
    `extra` so they survive a round trip through the registry.
    """
    utterance: Optional[str]
    slots: Dict[str, Any] = field(default_factory=dict)
    parameters: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IntentContext":
        data = copy.deepcopy(data)
        utterance = data.pop("utterance", None)
        slots = data.pop("slots", None) or {}
        parameters = data.pop("parameters", None) or {}
        return cls(utterance=utterance, slots=slots, parameters=parameters, extra=data)

    def to_dict(self) -> Dict[str, Any]:
        out = copy.deepcopy(self.extra)
        out.update({
            "utterance": self.utterance,
            "slots": copy.deepcopy(self.slots),
            "parameters": copy.deepcopy(self.parameters),
        })
        return out


@dataclass
class RoutineDefinition:
    nickname: str
    contexts: List[IntentContext]
    slots: Dict[str, Any] = field(default_factory=dict)
    parameters: Dict[str, Any] = field(default_factory=dict)
    utterance: str = ""

    @classmethod
    def build(cls, nickname: str, contexts: List[IntentContext]) -> "RoutineDefinition":
        """The one canonical shape a routine is stored in, remotely and locally."""
        return cls(
            nickname=nickname,
            contexts=list(contexts),
            slots={},
            parameters={},
            utterance=ROUTINE_UTTERANCE_PREFIX + nickname,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: Optional[str] = None) -> "RoutineDefinition":
        nickname = data.get("nickname") or name or ""
        return cls(
            nickname=nickname,
            contexts=[IntentContext.from_dict(c) for c in data.get("contexts") or []],
            slots=dict(data.get("slots") or {}),
            parameters=dict(data.get("parameters") or {}),
            utterance=data.get("utterance") or ROUTINE_UTTERANCE_PREFIX + nickname,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nickname": self.nickname,
            "contexts": [c.to_dict() for c in self.contexts],
            "slots": copy.deepcopy(self.slots),
            "parameters": copy.deepcopy(self.parameters),
            "utterance": self.utterance,
        }


@dataclass
class RoutineDraft:
    nickname: str
    intents: str = ""   # raw text, one candidate command per line


def draft_from_definition(definition: RoutineDefinition) -> RoutineDraft:
    """Seed an edit form from a stored routine: one utterance per line."""
    intents = "".join(f"{c.utterance}\n" for c in definition.contexts)
    return RoutineDraft(nickname=definition.nickname, intents=intents)
