"""
Target-rate bias transform.

Turns an outcome table plus an operator win rate into the effective
distribution the sampler draws from:

- win-class outcomes share p_win = rate / 100 in proportion to their weights
- lose-class outcomes share 1 - p_win the same way
- at rate 0 (or 100) the win (or lose) class gets exactly 0

Recomputed for every draw. Config can change between draws, so nothing
here is cached.
"""
import logging
import math

from fairspin.config import settings
from fairspin.errors import ConfigError, ErrorCode
from fairspin.logic.models import EffectiveDistribution, OutcomeTable, clamp_win_rate


logger = logging.getLogger(__name__)


def effective_distribution(
    table: OutcomeTable,
    target_win_rate: float,
    tolerance: float | None = None,
) -> EffectiveDistribution:
    """
    Compute (outcome, probability) pairs in table order.

    Args:
        table: Validated outcome table
        target_win_rate: Percent 0..100, clamped when out of range
        tolerance: Max allowed drift of the total from 1 before
            renormalising (defaults to settings.normalization_tolerance)

    Returns:
        Tuple of (Outcome, probability) summing to 1.

    Raises:
        ConfigError if a class with positive target mass has no weight.
    """
    if tolerance is None:
        tolerance = settings.normalization_tolerance

    p_win = clamp_win_rate(target_win_rate) / 100.0
    p_lose = 1.0 - p_win

    win_total = math.fsum(o.weight for o in table.outcomes if o.is_win)
    lose_total = math.fsum(o.weight for o in table.outcomes if not o.is_win)

    # validate_table already guarantees both classes; re-checked here
    if p_win > 0 and win_total <= 0:
        raise ConfigError(
            ErrorCode.NO_WIN_MASS,
            f"Win rate {target_win_rate}% needs at least one win outcome.",
        )
    if p_lose > 0 and lose_total <= 0:
        raise ConfigError(
            ErrorCode.NO_LOSE_MASS,
            f"Win rate {target_win_rate}% needs at least one lose outcome.",
        )

    pairs: list[tuple] = []
    for outcome in table.outcomes:
        if outcome.is_win:
            prob = p_win * (outcome.weight / win_total) if p_win > 0 else 0.0
        else:
            prob = p_lose * (outcome.weight / lose_total) if p_lose > 0 else 0.0
        pairs.append((outcome, prob))

    total = math.fsum(p for _, p in pairs)
    if abs(total - 1.0) > tolerance:
        logger.debug("Renormalising effective distribution (sum=%r)", total)
        pairs = [(o, p / total) for o, p in pairs]

    return tuple(pairs)


def win_mass(distribution: EffectiveDistribution) -> float:
    """Total probability assigned to win-class outcomes."""
    return math.fsum(p for o, p in distribution if o.is_win)


def as_mapping(distribution: EffectiveDistribution) -> dict[str, float]:
    """Outcome id -> probability, for admin previews and telemetry."""
    return {o.id: p for o, p in distribution}


def expected_return(distribution: EffectiveDistribution) -> float:
    """Long-run payout per unit bet (RTP as a fraction)."""
    return math.fsum(p * o.multiplier for o, p in distribution)
