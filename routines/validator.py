# routines/validator.py

import logging
from typing import AbstractSet, Optional, Protocol

from routines.errors import DuplicateName, EmptyRoutine, InvalidIntent
from routines.intent_lines import split_intent_lines
from routines.models import IntentContext, RoutineDefinition, RoutineDraft

logger = logging.getLogger(__name__)


class UtteranceParser(Protocol):
    async def parse(self, utterance: str) -> Optional[IntentContext]: ...


async def validate(draft: RoutineDraft,
                   existing_names: AbstractSet[str],
                   parser: UtteranceParser,
                   previous_name: Optional[str] = None) -> RoutineDefinition:
    """
    Compile a draft into a RoutineDefinition.

    Lines are parsed one at a time, in order, and the first line that does not
    parse stops validation, so the reported position is always the first bad
    line. Positions count non-blank lines from 1.

    Raises DuplicateName, InvalidIntent or EmptyRoutine.
    """
    nickname = draft.nickname
    if nickname in existing_names and (previous_name is None or previous_name != nickname):
        raise DuplicateName(nickname)

    contexts = []
    for position, line in enumerate(split_intent_lines(draft.intents), 1):
        context = await parser.parse(line)
        if context is None or context.utterance is None:
            raise InvalidIntent(position, line)
        contexts.append(context)

    if not contexts:
        raise EmptyRoutine()

    logger.debug("Routine %r compiled to %d actions", nickname, len(contexts))
    return RoutineDefinition.build(nickname, contexts)
