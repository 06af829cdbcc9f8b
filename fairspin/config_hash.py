"""Config hash for game configs.

This module provides a shared config_hash function used by:
- engine.py (SpinResult.config_hash)
- telemetry.py events (spin_processed, config_updated)
- scripts/audit_sim.py (CSV audit)

The hash MUST be computed identically in all locations.
"""
import hashlib
import json

from fairspin.logic.models import GameConfig


def get_config_hash(config: GameConfig) -> str:
    """
    Generate hash of a game config snapshot.

    Returns 16-char hex hash over game type, win rate and the ordered
    outcome table. Two configs with the same hash draw identically for
    the same uniform values.
    """
    config_snapshot = {
        "game_type": config.game_type,
        "target_win_rate": config.target_win_rate,
        "outcomes": [
            [o.id, o.weight, o.multiplier] for o in config.table.outcomes
        ],
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
