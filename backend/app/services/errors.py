"""Domain errors raised by guess submission and FMV reads."""

from __future__ import annotations

from datetime import datetime


class GuessEngineError(RuntimeError):
    """Base class for typed guess/FMV failures."""

    code = "GUESS_ENGINE_ERROR"


class PropertyNotFoundError(GuessEngineError):
    code = "NOT_FOUND"

    def __init__(self, property_id: int) -> None:
        super().__init__(f"Property with ID {property_id} not found")
        self.property_id = property_id


class UnauthorizedError(GuessEngineError):
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required to submit a guess.") -> None:
        super().__init__(message)


class InvalidGuessError(GuessEngineError):
    code = "INVALID_INPUT"


class CooldownActiveError(GuessEngineError):
    """Edit attempted before the cooldown elapsed."""

    code = "COOLDOWN_ACTIVE"

    def __init__(self, cooldown_ends_at: datetime) -> None:
        super().__init__("You must wait before updating your guess.")
        self.cooldown_ends_at = cooldown_ends_at
