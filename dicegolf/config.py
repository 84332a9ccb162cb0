from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Course generation
    grid_size: int = 8

    # Round rules
    starting_mulligans: int = 6

    # Simulation limits
    max_auto_resolve: int = 50
    max_actions_per_round: int = 500

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DICEGOLF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
