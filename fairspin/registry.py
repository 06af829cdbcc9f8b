"""Per game-type config store with atomic replace semantics."""
import logging
import threading

from fairspin.logic.models import GameConfig


logger = logging.getLogger(__name__)


class ConfigRegistry:
    """
    Holds the current GameConfig for each game type.

    Single writer, many readers. A write replaces the whole GameConfig
    reference under a lock; reads take the reference without locking, so
    a reader sees either the old config or the new one, never a mix of
    old table and new win rate.
    """

    def __init__(self) -> None:
        self._configs: dict[str, GameConfig] = {}
        self._write_lock = threading.Lock()

    def get(self, game_type: str) -> GameConfig | None:
        return self._configs.get(game_type)

    def put(self, config: GameConfig) -> GameConfig | None:
        """Swap in a new config. Returns the one it replaced."""
        with self._write_lock:
            previous = self._configs.get(config.game_type)
            # Copy-on-write so readers iterating snapshot() never see a resize
            configs = dict(self._configs)
            configs[config.game_type] = config
            self._configs = configs
        logger.debug("Config swapped for %s", config.game_type)
        return previous

    def remove(self, game_type: str) -> GameConfig | None:
        with self._write_lock:
            configs = dict(self._configs)
            previous = configs.pop(game_type, None)
            self._configs = configs
        return previous

    def is_current(self, config: GameConfig) -> bool:
        """True if config is the exact object currently registered."""
        return self._configs.get(config.game_type) is config

    def game_types(self) -> list[str]:
        return sorted(self._configs)

    def snapshot(self) -> dict[str, GameConfig]:
        return dict(self._configs)
