import pytest

from core.event_bus import EventBus
from routines.models import IntentContext, RoutineDefinition
from routines.offline import OfflineParser, OfflineRegistry
from routines.synchronizer import RoutineSynchronizer


def make_routine(name, *utterances):
    return RoutineDefinition.build(name, [IntentContext(utterance=u) for u in utterances])


@pytest.fixture
def routine_factory():
    return make_routine


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def registry():
    return OfflineRegistry({
        "morning": make_routine("morning", "play the news", "what's the weather"),
        "bedtime": make_routine("bedtime", "set a timer for 20 minutes"),
    })


@pytest.fixture
def parser():
    return OfflineParser(rejected=["bar", "fly me to the moon"])


@pytest.fixture
def sync(registry, parser, bus):
    return RoutineSynchronizer(registry, parser, bus=bus)
