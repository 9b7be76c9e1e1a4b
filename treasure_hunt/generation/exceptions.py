"""Exceptions raised by map generation."""


class GenerationError(Exception):
    """Base class for map generation failures."""


class GenerationExhausted(GenerationError):
    """
    Raised when a placement loop runs out of attempts.

    Signals a configuration error such as asking for more obstacles or
    treasures than the grid can host while staying connected.
    """

    def __init__(self, message: str, kind: str = "", requested: int = 0, placed: int = 0, attempts: int = 0):
        super().__init__(message)
        self.kind = kind
        self.requested = requested
        self.placed = placed
        self.attempts = attempts
