"""Engine configuration derived from admin defaults and environment."""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings with defaults matching the admin console sliders."""

    model_config = ConfigDict(env_prefix="FAIRSPIN_")

    debug: bool = False
    log_level: str = "INFO"

    # Target win rates (percent of draws landing on a win-class outcome)
    slots_win_rate: float = 35.0
    wheel_win_rate: float = 45.0
    lucky_gift_win_rate: float = 30.0

    # Lucky gift refund, percent of the gift cost (200 -> x2)
    lucky_gift_refund_percent: float = 200.0

    # Effective distribution must sum to 1 within this tolerance
    normalization_tolerance: float = 1e-9


settings = Settings()
