"""Application configuration loaded from environment variables.

Settings for the NEAR RPC endpoint, the review contract, and the polling
loop. Uses pydantic-settings for validation and .env file support.
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NearNetwork = Literal["testnet", "mainnet", "betanet", "local"]

# Public RPC endpoints per network (local is a sandbox/nearcore node)
_DEFAULT_RPC_URLS: dict[str, str] = {
    "testnet": "https://rpc.testnet.near.org",
    "mainnet": "https://rpc.mainnet.near.org",
    "betanet": "https://rpc.betanet.near.org",
    "local": "http://localhost:3030",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # NEAR
    near_network: NearNetwork = "testnet"
    near_rpc_url: str = ""
    contract_name: str = "review.testnet"
    rpc_timeout_seconds: float = 10.0

    # Polling
    page_size: int = 3
    poll_interval_ms: int = 1000
    stale_after_ticks: int = 2

    @property
    def rpc_url(self) -> str:
        """RPC endpoint, falling back to the public node for near_network."""
        return self.near_rpc_url or _DEFAULT_RPC_URLS[self.near_network]

    @model_validator(mode="after")
    def check_polling_bounds(self) -> "Settings":
        """Reject non-positive polling and timeout values.

        A paginator built from these settings would otherwise fail on
        construction, so misconfiguration is surfaced at load time.
        """
        for name in ("page_size", "poll_interval_ms", "stale_after_ticks"):
            value = getattr(self, name)
            if value <= 0:
                msg = f"{name.upper()} must be positive. Got: {value}"
                raise ValueError(msg)

        if self.rpc_timeout_seconds <= 0:
            msg = (
                "RPC_TIMEOUT_SECONDS must be positive. "
                f"Got: {self.rpc_timeout_seconds}"
            )
            raise ValueError(msg)

        if not self.contract_name:
            msg = "CONTRACT_NAME must be set to the review contract account id."
            raise ValueError(msg)

        return self


settings = Settings()
