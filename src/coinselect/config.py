"""
Configuration management using pydantic-settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from coinselect.constants import BNB_MAX_ATTEMPTS, DUST_RELAY_FEE_RATE, MAX_FEE_RATE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="COINSELECT_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    dust_relay_fee_rate: float = Field(
        default=DUST_RELAY_FEE_RATE, ge=1, description="Relay fee rate for dust checks (sat/vB)"
    )
    max_fee_rate: float = Field(
        default=MAX_FEE_RATE, ge=1, description="Highest fee rate accepted (sat/vB)"
    )
    bnb_max_attempts: int = Field(
        default=BNB_MAX_ATTEMPTS, ge=1, description="Branch-and-bound search budget"
    )


def get_settings() -> Settings:
    return Settings()
