# routines/errors.py


class RoutineError(Exception):
    """Base class for routine errors."""


class RegistryProtocolError(RoutineError):
    """The registry answered with something that is not a routine mapping."""


class RoutineValidationError(RoutineError):
    """A draft could not be compiled. `message` is shown to the user as-is."""

    message = "This routine is not valid"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DuplicateName(RoutineValidationError):
    message = "There already is a routine with this name"

    def __init__(self, nickname: str):
        self.nickname = nickname
        super().__init__()


class InvalidIntent(RoutineValidationError):
    def __init__(self, position: int, utterance: str = ""):
        self.position = position
        self.utterance = utterance
        super().__init__(f"The intent number {position} is not a valid intent")


class EmptyRoutine(RoutineValidationError):
    message = "No actions added for this routine"
