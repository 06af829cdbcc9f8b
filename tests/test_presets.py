"""Default tables, settings and config hash tests."""
import pytest

from fairspin.config import Settings, settings
from fairspin.config_hash import get_config_hash
from fairspin.errors import ConfigError, ErrorCode
from fairspin.logic.bias import effective_distribution, expected_return, win_mass
from fairspin.logic.models import GameConfig
from fairspin.logic.rng import SeededRNG
from fairspin.presets import (
    LUCKY_GIFT,
    SLOTS,
    WHEEL,
    default_engine,
    lucky_gift_table,
    slots_table,
    wheel_table,
)


class TestSettings:
    def test_admin_defaults(self):
        assert settings.slots_win_rate == 35
        assert settings.wheel_win_rate == 45
        assert settings.lucky_gift_win_rate == 30
        assert settings.lucky_gift_refund_percent == 200
        assert settings.normalization_tolerance == 1e-9

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FAIRSPIN_WHEEL_WIN_RATE", "20")
        assert Settings().wheel_win_rate == 20


class TestPresetTables:
    @pytest.mark.parametrize("build", [slots_table, wheel_table])
    def test_tables_have_both_classes(self, build):
        table = build()
        assert table.win_outcomes
        assert table.lose_outcomes

    def test_lucky_gift_refund_multiplier(self):
        table = lucky_gift_table(250)
        assert table.get("refund").multiplier == 2.5
        assert table.get("miss").multiplier == 0

    def test_lucky_gift_zero_refund_is_invalid(self):
        with pytest.raises(ConfigError) as exc:
            lucky_gift_table(0)
        assert exc.value.code == ErrorCode.MISSING_WIN_OUTCOME


class TestDefaultEngine:
    def test_registers_all_games(self):
        engine = default_engine(rng=SeededRNG(seed=1))
        assert engine.registry.game_types() == sorted([LUCKY_GIFT, SLOTS, WHEEL])

    def test_win_rates_from_settings(self):
        custom = Settings(slots_win_rate=12, wheel_win_rate=80, lucky_gift_win_rate=5)
        engine = default_engine(settings=custom)
        for game, rate in ((SLOTS, 12), (WHEEL, 80), (LUCKY_GIFT, 5)):
            config = engine.get_game_config(game)
            dist = effective_distribution(config.table, config.target_win_rate)
            assert win_mass(dist) == pytest.approx(rate / 100)

    def test_lucky_gift_round(self):
        engine = default_engine()
        result = engine.spin(LUCKY_GIFT, 50, lambda: 0.95)
        assert result.outcome_id == "refund"
        assert result.payout_amount == 100


class TestConfigHash:
    def test_stable_and_short(self):
        config = GameConfig(game_type=SLOTS, table=slots_table(), target_win_rate=35)
        same = GameConfig(game_type=SLOTS, table=slots_table(), target_win_rate=35)
        assert get_config_hash(config) == get_config_hash(same)
        assert len(get_config_hash(config)) == 16

    def test_changes_with_rate_and_table(self):
        base = GameConfig(game_type=SLOTS, table=slots_table(), target_win_rate=35)
        other_rate = GameConfig(game_type=SLOTS, table=slots_table(), target_win_rate=36)
        other_table = GameConfig(game_type=SLOTS, table=wheel_table(), target_win_rate=35)
        hashes = {get_config_hash(c) for c in (base, other_rate, other_table)}
        assert len(hashes) == 3


@pytest.mark.parametrize(
    "game, expected_rtp",
    [(SLOTS, 0.952), (WHEEL, 0.90), (LUCKY_GIFT, 0.60)],
)
def test_default_tables_keep_a_house_edge(game, expected_rtp):
    engine = default_engine(rng=SeededRNG(seed=1))
    config = engine.get_game_config(game)
    rtp = expected_return(effective_distribution(config.table, config.target_win_rate))
    assert rtp == pytest.approx(expected_rtp)
    assert rtp < 1
