from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App
    APP_NAME: str = "SommStats"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Remote nodes (Cosmos SDK REST). JSON list in env, e.g. '["https://a", "https://b"]'.
    # Empty list fails startup.
    NODE_ENDPOINTS: list[str] = []
    FAILED_QUERY_RETRIES: int = Field(3, ge=0)
    QUERY_TIMEOUT_SECONDS: float = Field(10.0, gt=0)
    RETRY_BASE_DELAY_SECONDS: float = Field(0.5, ge=0)
    RETRY_MAX_DELAY_SECONDS: float = Field(10.0, ge=0)

    # Chain
    DENOM: str = "usomm"
    FOUNDATION_ADDRESSES: list[str] = []
    VESTING_ADDRESSES: list[str] = []

    # Refresh periods (seconds)
    COMMUNITY_POOL_UPDATE_PERIOD: int = Field(3600, gt=0)
    VESTING_UPDATE_PERIOD: int = Field(3600, gt=0)
    FOUNDATION_WALLET_UPDATE_PERIOD: int = Field(3600, gt=0)
    STAKING_UPDATE_PERIOD: int = Field(3600, gt=0)
    # None → shortest of the four periods above
    TOTAL_SUPPLY_UPDATE_PERIOD: int | None = Field(None, gt=0)

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def total_supply_update_period(self) -> int:
        if self.TOTAL_SUPPLY_UPDATE_PERIOD is not None:
            return self.TOTAL_SUPPLY_UPDATE_PERIOD
        return min(
            self.COMMUNITY_POOL_UPDATE_PERIOD,
            self.VESTING_UPDATE_PERIOD,
            self.FOUNDATION_WALLET_UPDATE_PERIOD,
            self.STAKING_UPDATE_PERIOD,
        )


settings = Settings()
