class ChangeEngineError(ValueError):
    """Base class for every error raised by change_engine."""


class InvalidInputError(ChangeEngineError):
    pass


class MissingTierError(ChangeEngineError):
    """A Normal change was resolved without a risk tier."""


class PolicyKeyNotFoundError(ChangeEngineError):
    def __init__(self, key: str):
        super().__init__(f"No workflow defined for policy key: {key}")
        self.key = key


class PolicyConfigError(ChangeEngineError):
    pass
