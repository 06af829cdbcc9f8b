"""Balance boundary around a spin.

The engine never touches balances. play_round() is the orchestration
step the game screens use: check the spin can run, debit the bet, spin,
credit the payout. A spin that cannot run never charges the bet.
"""
import logging
import math
import threading
from dataclasses import dataclass
from typing import Protocol

from fairspin.errors import ErrorCode, GameError
from fairspin.logic.engine import GameEngine, RandomSource
from fairspin.logic.models import SpinResult


logger = logging.getLogger(__name__)


class Ledger(Protocol):
    """External coin ledger."""

    def balance(self, player_id: str) -> float:
        ...

    def debit(self, player_id: str, amount: float) -> float:
        """Remove amount, return new balance. Raises INSUFFICIENT_FUNDS."""
        ...

    def credit(self, player_id: str, amount: float) -> float:
        """Add amount, return new balance."""
        ...


class InMemoryLedger:
    """Process-local ledger for tests and simulations. Not persisted."""

    def __init__(self, balances: dict[str, float] | None = None):
        self._balances: dict[str, float] = dict(balances or {})
        self._lock = threading.Lock()

    def balance(self, player_id: str) -> float:
        return self._balances.get(player_id, 0.0)

    def debit(self, player_id: str, amount: float) -> float:
        with self._lock:
            current = self._balances.get(player_id, 0.0)
            if current < amount:
                raise GameError(
                    ErrorCode.INSUFFICIENT_FUNDS,
                    f"Balance {current} is below bet {amount}.",
                )
            self._balances[player_id] = current - amount
            return self._balances[player_id]

    def credit(self, player_id: str, amount: float) -> float:
        with self._lock:
            self._balances[player_id] = self._balances.get(player_id, 0.0) + amount
            return self._balances[player_id]


@dataclass
class RoundReceipt:
    """Spin result plus the balance movement it caused."""

    result: SpinResult
    balance_before: float
    balance_after: float
    credited: float = 0.0


def play_round(
    engine: GameEngine,
    ledger: Ledger,
    player_id: str,
    game_type: str,
    bet_amount: float,
    random_source: RandomSource | None = None,
    whole_coins: bool = False,
) -> RoundReceipt:
    """
    Debit, spin and credit one round.

    With whole_coins the credited payout is floored to an integer, for
    ledgers that only hold whole coins. The SpinResult keeps the exact
    payout.

    Raises:
        SpinError if the bet or config is invalid (nothing debited)
        GameError(INSUFFICIENT_FUNDS) if the player cannot cover the bet
    """
    # 1) Spin must be able to run before any coins move
    config, bet = engine.prepare(game_type, bet_amount)

    # 2) Reserve the bet
    balance_before = ledger.balance(player_id)
    ledger.debit(player_id, bet)

    # 3) Spin against the exact config that was checked
    try:
        result = engine.spin_config(config, bet, random_source)
    except Exception:
        # Refund; the round never produced a result
        ledger.credit(player_id, bet)
        raise

    # 4) Pay out
    credited = math.floor(result.payout_amount) if whole_coins else result.payout_amount
    balance_after = ledger.balance(player_id)
    if credited > 0:
        balance_after = ledger.credit(player_id, credited)

    logger.debug(
        "Round %s for %s: bet=%s payout=%s balance %s -> %s",
        game_type,
        player_id,
        bet,
        credited,
        balance_before,
        balance_after,
    )
    return RoundReceipt(
        result=result,
        balance_before=balance_before,
        balance_after=balance_after,
        credited=credited,
    )
