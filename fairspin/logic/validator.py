"""Outcome table validation. Rejects a table before it can be sampled."""
import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from fairspin.errors import ConfigError, ErrorCode
from fairspin.logic.models import Outcome, OutcomeTable


def _coerce(item: Outcome | Mapping[str, Any], index: int) -> Outcome:
    if isinstance(item, Outcome):
        return item
    try:
        return Outcome.model_validate(item)
    except ValidationError as e:
        raise ConfigError(
            ErrorCode.INVALID_OUTCOME,
            f"Outcome at position {index} is malformed: {e.errors()[0]['msg']}",
        ) from e


def validate_table(outcomes: Iterable[Outcome | Mapping[str, Any]]) -> OutcomeTable:
    """
    Validate a candidate outcome table.

    Checks run in a fixed order and the first violation wins:
    non-empty, weights > 0, multipliers >= 0, at least one lose outcome,
    at least one win outcome, unique ids. Nothing is repaired.

    Raises:
        ConfigError naming the violated rule.
    """
    items = [_coerce(item, i) for i, item in enumerate(outcomes)]

    if not items:
        raise ConfigError(ErrorCode.EMPTY_TABLE, "Outcome table is empty.")

    for outcome in items:
        if not (math.isfinite(outcome.weight) and outcome.weight > 0):
            raise ConfigError(
                ErrorCode.NON_POSITIVE_WEIGHT,
                f"Outcome {outcome.id!r} has weight {outcome.weight}; "
                "weights must be positive.",
            )

    for outcome in items:
        if not (math.isfinite(outcome.multiplier) and outcome.multiplier >= 0):
            raise ConfigError(
                ErrorCode.NEGATIVE_MULTIPLIER,
                f"Outcome {outcome.id!r} has multiplier {outcome.multiplier}; "
                "multipliers must be non-negative.",
            )

    if not any(not o.is_win for o in items):
        raise ConfigError(
            ErrorCode.MISSING_LOSE_OUTCOME,
            "Outcome table needs at least one outcome with multiplier 0.",
        )

    if not any(o.is_win for o in items):
        raise ConfigError(
            ErrorCode.MISSING_WIN_OUTCOME,
            "Outcome table needs at least one outcome with multiplier > 0.",
        )

    seen: set[str] = set()
    for outcome in items:
        if outcome.id in seen:
            raise ConfigError(
                ErrorCode.DUPLICATE_OUTCOME_ID,
                f"Outcome id {outcome.id!r} appears more than once.",
            )
        seen.add(outcome.id)

    return OutcomeTable(outcomes=tuple(items))
