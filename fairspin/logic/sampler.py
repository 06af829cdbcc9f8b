"""Inverse-CDF weighted sampler."""
from fairspin.errors import ConfigError, ErrorCode
from fairspin.logic.models import EffectiveDistribution, Outcome


def sample(distribution: EffectiveDistribution, u: float) -> Outcome:
    """
    Pick one outcome for a uniform value u in [0, 1).

    Walks the cumulative sum in table order and returns the first outcome
    whose cumulative probability is strictly greater than u. Given the same
    distribution and u the answer is always the same, which is what makes
    a draw replayable.

    If u >= 1, u is NaN, or float rounding leaves the cumulative sum at or
    below u, the last outcome in table order is returned. Outcomes with
    zero probability are skipped by the fallback too, so a 0% win rate
    can never pay out. This differs from the last table outcome only when
    that outcome has zero probability.
    """
    if not distribution:
        raise ConfigError(ErrorCode.EMPTY_TABLE, "Cannot sample an empty distribution.")

    cumulative = 0.0
    for outcome, probability in distribution:
        cumulative += probability
        if probability > 0 and cumulative > u:
            return outcome

    for outcome, probability in reversed(distribution):
        if probability > 0:
            return outcome
    return distribution[-1][0]
