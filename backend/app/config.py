"""Application configuration derived from environment."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Slot engine settings with session defaults."""

    model_config = SettingsConfigDict(env_prefix="SLOT_")

    # Server
    debug: bool = False
    log_level: str = "INFO"

    # Protocol
    protocol_version: str = "1.0"

    # Bankroll
    initial_stake: int = 200
    spin_cost: int = 2

    # Reels
    reel_count: int = 3
    lucky_symbol: str = "7️⃣"

    # Spin animation
    frame_count: int = 26
    frame_delay_ms: int = 45

    # Autoplay
    autoplay_default_delay_ms: int = 750
    autoplay_min_delay_ms: int = 300
    autoplay_max_delay_ms: int = 2000

    # History
    history_limit: int = 25


settings = Settings()
