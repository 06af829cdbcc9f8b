"""Error codes and exceptions for table configuration and spins."""
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes surfaced to the admin and game layers."""

    # Table / config rules, in validation order
    EMPTY_TABLE = "EMPTY_TABLE"
    NON_POSITIVE_WEIGHT = "NON_POSITIVE_WEIGHT"
    NEGATIVE_MULTIPLIER = "NEGATIVE_MULTIPLIER"
    MISSING_LOSE_OUTCOME = "MISSING_LOSE_OUTCOME"
    MISSING_WIN_OUTCOME = "MISSING_WIN_OUTCOME"
    DUPLICATE_OUTCOME_ID = "DUPLICATE_OUTCOME_ID"

    INVALID_OUTCOME = "INVALID_OUTCOME"
    INVALID_WIN_RATE = "INVALID_WIN_RATE"
    NO_WIN_MASS = "NO_WIN_MASS"
    NO_LOSE_MASS = "NO_LOSE_MASS"
    UNKNOWN_GAME = "UNKNOWN_GAME"

    # Spin-time errors
    INVALID_BET = "INVALID_BET"
    CONFIG_ERROR = "CONFIG_ERROR"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"


# Config errors are fixed by the operator, not by retrying
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.EMPTY_TABLE: False,
    ErrorCode.NON_POSITIVE_WEIGHT: False,
    ErrorCode.NEGATIVE_MULTIPLIER: False,
    ErrorCode.MISSING_LOSE_OUTCOME: False,
    ErrorCode.MISSING_WIN_OUTCOME: False,
    ErrorCode.DUPLICATE_OUTCOME_ID: False,
    ErrorCode.INVALID_OUTCOME: False,
    ErrorCode.INVALID_WIN_RATE: False,
    ErrorCode.NO_WIN_MASS: False,
    ErrorCode.NO_LOSE_MASS: False,
    ErrorCode.UNKNOWN_GAME: False,
    ErrorCode.INVALID_BET: False,
    ErrorCode.CONFIG_ERROR: False,
    ErrorCode.INSUFFICIENT_FUNDS: True,
}


class GameError(Exception):
    """Base engine error carrying a code the UI layer can render."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the error body shown by the game and admin screens."""
        return {
            "code": self.code.value,
            "message": self.message,
            "recoverable": self.recoverable,
        }


class ConfigError(GameError):
    """Outcome table or win rate is structurally invalid."""


class SpinError(GameError):
    """
    Spin could not run.

    Either the bet was invalid (INVALID_BET) or the game's configuration
    failed at spin time (CONFIG_ERROR, with the original ConfigError
    in ``cause``).
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str | None = None,
        cause: ConfigError | None = None,
    ):
        super().__init__(code, message)
        self.cause = cause

    @classmethod
    def from_config_error(cls, error: ConfigError) -> "SpinError":
        """Wrap a ConfigError raised while preparing a spin."""
        return cls(ErrorCode.CONFIG_ERROR, error.message, cause=error)

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.cause is not None:
            body["cause"] = self.cause.code.value
        return body
