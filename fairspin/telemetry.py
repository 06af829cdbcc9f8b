"""Engine telemetry: spins, rejections and config changes."""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class SpinProcessedEvent:
    """spin_processed: one outcome drawn and paid."""

    game_type: str
    outcome_id: str
    multiplier: float
    bet_amount: float
    payout_amount: float
    is_win: bool
    config_hash: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SpinRejectedEvent:
    """spin_rejected: spin refused before any randomness was drawn."""

    game_type: str
    bet_amount: float
    reason: str  # "INVALID_BET" | "CONFIG_ERROR"
    cause: str | None  # wrapped ConfigError code, if any

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ConfigUpdatedEvent:
    """config_updated: operator swapped a game's table or win rate."""

    game_type: str
    target_win_rate: float
    outcome_count: int
    config_hash: str
    previous_hash: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class TelemetryService:
    """Service for emitting engine telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0  # Counter for sink failures

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break a spin or a config update.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_spin_processed(self, event: SpinProcessedEvent) -> None:
        self._safe_emit("spin_processed", event.to_dict())

    def emit_spin_rejected(self, event: SpinRejectedEvent) -> None:
        self._safe_emit("spin_rejected", event.to_dict())

    def emit_config_updated(self, event: ConfigUpdatedEvent) -> None:
        self._safe_emit("config_updated", event.to_dict())


# Global instance
telemetry_service = TelemetryService()
