"""Outcome tables, game configs and spin results."""
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fairspin.errors import ConfigError, ErrorCode


class Outcome(BaseModel):
    """
    One possible result of a spin or wheel draw.

    multiplier == 0 puts the outcome in the lose class, anything above
    zero in the win class. Weight is only meaningful relative to other
    outcomes of the same class.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str = ""
    weight: float
    multiplier: float

    @property
    def is_win(self) -> bool:
        return self.multiplier > 0


class OutcomeTable(BaseModel):
    """Ordered, immutable outcome list. Build with validate_table()."""

    model_config = ConfigDict(frozen=True)

    outcomes: tuple[Outcome, ...]

    @property
    def win_outcomes(self) -> tuple[Outcome, ...]:
        return tuple(o for o in self.outcomes if o.is_win)

    @property
    def lose_outcomes(self) -> tuple[Outcome, ...]:
        return tuple(o for o in self.outcomes if not o.is_win)

    def get(self, outcome_id: str) -> Outcome | None:
        for outcome in self.outcomes:
            if outcome.id == outcome_id:
                return outcome
        return None


def clamp_win_rate(value: float) -> float:
    """Clamp a slider value into [0, 100]. NaN or a non-number is a config error."""
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(
            ErrorCode.INVALID_WIN_RATE, f"Target win rate {value!r} is not a number."
        ) from e
    if math.isnan(value):
        raise ConfigError(ErrorCode.INVALID_WIN_RATE, "Target win rate is NaN.")
    return min(max(value, 0.0), 100.0)


class GameConfig(BaseModel):
    """
    Per game-type configuration.

    Replaced as a whole on every admin change; never mutated in place.
    """

    model_config = ConfigDict(frozen=True)

    game_type: str
    table: OutcomeTable
    target_win_rate: float = Field(description="Percent of draws that should win, 0..100")

    @field_validator("target_win_rate", mode="before")
    @classmethod
    def _clamp_rate(cls, value: float) -> float:
        return clamp_win_rate(value)


# Derived per draw, never stored: (outcome, probability) in table order
EffectiveDistribution = tuple[tuple[Outcome, float], ...]


class GameSession(BaseModel):
    """One spin request: bet, resolved outcome and payout."""

    bet_amount: float
    u: float
    outcome: Outcome
    payout_amount: float


class SpinResult(BaseModel):
    """Result returned to the game layer."""

    game_type: str
    outcome_id: str
    label: str = ""
    multiplier: float
    bet_amount: float
    payout_amount: float
    is_win: bool
    config_hash: str
