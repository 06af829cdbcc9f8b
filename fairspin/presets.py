"""Default outcome tables for the room mini-games."""
from fairspin.config import Settings, settings as default_settings
from fairspin.logic.engine import GameEngine
from fairspin.logic.models import Outcome, OutcomeTable
from fairspin.logic.rng import RNGBase
from fairspin.logic.validator import validate_table


SLOTS = "slots"
WHEEL = "wheel"
LUCKY_GIFT = "lucky_gift"

# Slot symbols: (id, label, weight, multiplier)
SLOT_SYMBOLS = [
    ("blank", "No match", 60, 0),
    ("pair", "Two of a kind", 25, 0),
    ("cherry", "🍒🍒🍒", 40, 1.5),
    ("lemon", "🍋🍋🍋", 30, 2),
    ("grape", "🍇🍇🍇", 15, 3),
    ("bell", "🔔🔔🔔", 10, 5),
    ("diamond", "💎💎💎", 4, 8),
    ("seven", "7️⃣7️⃣7️⃣", 1, 25),
]

# Wheel segments in clockwise order. Weight is the relative
# "probability" the admin sets per segment.
WHEEL_SEGMENTS = [
    ("w_x1_5", "x1.5", 60, 1.5),
    ("w_miss_1", "Try again", 30, 0),
    ("w_x2", "x2", 25, 2),
    ("w_miss_2", "Try again", 30, 0),
    ("w_x3", "x3", 10, 3),
    ("w_x5", "x5", 4, 5),
    ("w_miss_3", "Try again", 30, 0),
    ("w_x10", "x10", 1, 10),
]


def _table(rows: list[tuple]) -> OutcomeTable:
    return validate_table(
        Outcome(id=i, label=label, weight=w, multiplier=m) for i, label, w, m in rows
    )


def slots_table() -> OutcomeTable:
    return _table(SLOT_SYMBOLS)


def wheel_table() -> OutcomeTable:
    return _table(WHEEL_SEGMENTS)


def lucky_gift_table(refund_percent: float) -> OutcomeTable:
    """
    Two-outcome table for lucky gifts.

    A lucky hit refunds refund_percent of the gift cost (200 -> x2).
    Payouts are not rounded: 150 on a cost of 3 pays 4.5. Integer coin
    ledgers floor it with play_round(..., whole_coins=True).
    """
    return _table([
        ("miss", "No luck", 1, 0),
        ("refund", f"x{refund_percent / 100:g}", 1, refund_percent / 100),
    ])


def default_engine(
    rng: RNGBase | None = None,
    settings: Settings | None = None,
) -> GameEngine:
    """Engine with slots, wheel and lucky gift registered from settings."""
    settings = settings or default_settings
    engine = GameEngine(rng=rng)
    engine.set_game_config(SLOTS, slots_table(), settings.slots_win_rate)
    engine.set_game_config(WHEEL, wheel_table(), settings.wheel_win_rate)
    engine.set_game_config(
        LUCKY_GIFT,
        lucky_gift_table(settings.lucky_gift_refund_percent),
        settings.lucky_gift_win_rate,
    )
    return engine
