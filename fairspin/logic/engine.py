"""Spin orchestration over validated tables and operator win rates."""
import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from fairspin.config_hash import get_config_hash
from fairspin.errors import ConfigError, ErrorCode, SpinError
from fairspin.logic.bias import as_mapping, effective_distribution
from fairspin.logic.models import GameConfig, GameSession, Outcome, OutcomeTable, SpinResult
from fairspin.logic.rng import ProductionRNG, RNGBase
from fairspin.logic.sampler import sample
from fairspin.logic.validator import validate_table
from fairspin.registry import ConfigRegistry
from fairspin.telemetry import (
    ConfigUpdatedEvent,
    SpinProcessedEvent,
    SpinRejectedEvent,
    TelemetryService,
    telemetry_service,
)


logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]
TableInput = OutcomeTable | Iterable[Outcome | Mapping[str, Any]]


def check_bet(bet_amount: Any) -> float:
    """Return the bet as float, or raise INVALID_BET."""
    if isinstance(bet_amount, bool) or not isinstance(bet_amount, (int, float)):
        raise SpinError(ErrorCode.INVALID_BET, f"Bet amount {bet_amount!r} is not a number.")
    if not math.isfinite(bet_amount) or bet_amount <= 0:
        raise SpinError(ErrorCode.INVALID_BET, f"Bet amount {bet_amount} must be positive.")
    return float(bet_amount)


class GameEngine:
    """
    Outcome engine for the casino mini-games.

    Implements:
    - Operator config updates (validated, swapped atomically per game type)
    - Spin resolution: bias transform, one uniform draw, inverse-CDF sample
    - Payout calculation (bet x multiplier)

    Holds no balances. Debiting the bet and crediting the payout belong to
    the caller (see fairspin.ledger.play_round).
    """

    def __init__(
        self,
        rng: RNGBase | None = None,
        registry: ConfigRegistry | None = None,
        telemetry: TelemetryService | None = None,
    ):
        self.rng = rng or ProductionRNG()
        self.registry = registry or ConfigRegistry()
        self.telemetry = telemetry or telemetry_service

    # === Operator side ===

    def set_game_config(
        self, game_type: str, table: TableInput, target_win_rate: float
    ) -> GameConfig:
        """
        Validate and install a new config for game_type.

        The win rate is clamped to [0, 100]. Takes effect on the next spin.

        Raises:
            ConfigError if the table is invalid; the previous config stays.
        """
        outcomes = table.outcomes if isinstance(table, OutcomeTable) else table
        validated = validate_table(outcomes)
        config = GameConfig(
            game_type=game_type, table=validated, target_win_rate=target_win_rate
        )
        # Reject configs the transform cannot satisfy before they go live
        effective_distribution(config.table, config.target_win_rate)

        previous = self.registry.put(config)
        config_hash = get_config_hash(config)
        logger.info(
            "Game config updated: %s win_rate=%.2f outcomes=%d hash=%s",
            game_type,
            config.target_win_rate,
            len(validated.outcomes),
            config_hash,
        )
        self.telemetry.emit_config_updated(
            ConfigUpdatedEvent(
                game_type=game_type,
                target_win_rate=config.target_win_rate,
                outcome_count=len(validated.outcomes),
                config_hash=config_hash,
                previous_hash=get_config_hash(previous) if previous is not None else None,
            )
        )
        return config

    def get_game_config(self, game_type: str) -> GameConfig | None:
        return self.registry.get(game_type)

    def preview(self, game_type: str) -> dict[str, float]:
        """Effective probability per outcome id, for the admin screen."""
        config = self._require_config(game_type)
        return as_mapping(effective_distribution(config.table, config.target_win_rate))

    # === Player side ===

    def spin(
        self,
        game_type: str,
        bet_amount: float,
        random_source: RandomSource | None = None,
    ) -> SpinResult:
        """
        Run one spin for a registered game type.

        Args:
            game_type: Registered game type ("slots", "wheel", ...)
            bet_amount: Positive bet, already reserved by the caller
            random_source: Zero-arg callable returning floats in [0, 1);
                defaults to the engine RNG

        Returns:
            SpinResult with the chosen outcome and payout

        Raises:
            SpinError (INVALID_BET or CONFIG_ERROR). No randomness is
            consumed when a spin is rejected.
        """
        config, bet = self.prepare(game_type, bet_amount)
        return self._resolve(config, bet, random_source)

    def prepare(self, game_type: str, bet_amount: float) -> tuple[GameConfig, float]:
        """
        Check bet and config for a spin without drawing anything.

        Lets a caller confirm the spin can run before charging the bet.
        """
        try:
            bet = check_bet(bet_amount)
            config = self._require_config(game_type)
        except ConfigError as e:
            raise self._reject(game_type, bet_amount, SpinError.from_config_error(e)) from e
        except SpinError as e:
            raise self._reject(game_type, bet_amount, e)
        return config, bet

    def spin_config(
        self,
        config: GameConfig,
        bet_amount: float,
        random_source: RandomSource | None = None,
    ) -> SpinResult:
        """Run one spin against an explicit config snapshot."""
        try:
            bet = check_bet(bet_amount)
            if not self.registry.is_current(config):
                validate_table(config.table.outcomes)
        except ConfigError as e:
            raise self._reject(config.game_type, bet_amount, SpinError.from_config_error(e)) from e
        except SpinError as e:
            raise self._reject(config.game_type, bet_amount, e)

        return self._resolve(config, bet, random_source)

    def draw(
        self,
        config: GameConfig,
        bet: float,
        random_source: RandomSource | None = None,
    ) -> GameSession:
        """
        Resolve a single draw: distribution, one uniform value, sample.

        Raises ConfigError before touching the random source.
        """
        # 1) Effective distribution for the config as it is right now
        distribution = effective_distribution(config.table, config.target_win_rate)

        # 2) Exactly one uniform value per draw
        source = random_source or self.rng
        u = float(source())

        # 3) Sample and pay
        outcome = sample(distribution, u)
        return GameSession(
            bet_amount=bet,
            u=u,
            outcome=outcome,
            payout_amount=bet * outcome.multiplier,
        )

    def _resolve(
        self,
        config: GameConfig,
        bet: float,
        random_source: RandomSource | None,
    ) -> SpinResult:
        try:
            session = self.draw(config, bet, random_source)
        except ConfigError as e:
            raise self._reject(config.game_type, bet, SpinError.from_config_error(e)) from e

        config_hash = get_config_hash(config)
        outcome = session.outcome
        result = SpinResult(
            game_type=config.game_type,
            outcome_id=outcome.id,
            label=outcome.label,
            multiplier=outcome.multiplier,
            bet_amount=bet,
            payout_amount=session.payout_amount,
            is_win=outcome.is_win,
            config_hash=config_hash,
        )
        logger.debug(
            "Spin %s u=%.12f -> %s x%s payout=%s",
            config.game_type,
            session.u,
            outcome.id,
            outcome.multiplier,
            session.payout_amount,
        )
        self.telemetry.emit_spin_processed(
            SpinProcessedEvent(
                game_type=config.game_type,
                outcome_id=outcome.id,
                multiplier=outcome.multiplier,
                bet_amount=bet,
                payout_amount=session.payout_amount,
                is_win=outcome.is_win,
                config_hash=config_hash,
            )
        )
        return result

    def _require_config(self, game_type: str) -> GameConfig:
        config = self.registry.get(game_type)
        if config is None:
            raise ConfigError(
                ErrorCode.UNKNOWN_GAME, f"No config registered for game {game_type!r}."
            )
        return config

    def _reject(self, game_type: str, bet_amount: Any, error: SpinError) -> SpinError:
        logger.warning("Spin rejected for %s: %s", game_type, error.message)
        self.telemetry.emit_spin_rejected(
            SpinRejectedEvent(
                game_type=game_type,
                bet_amount=bet_amount,
                reason=error.code.value,
                cause=error.cause.code.value if error.cause else None,
            )
        )
        return error
