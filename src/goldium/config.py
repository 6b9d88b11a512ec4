"""Application configuration using pydantic-settings.

Holds ledger endpoints, the treasury relay address and the fixed
SOL/GOLD exchange constants.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Solana RPC Endpoints
    # ======================
    solana_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com", description="Primary Solana RPC URL"
    )
    solana_fallback_rpc_url: str = Field(
        default="https://solana-mainnet.g.alchemy.com/v2/alch-demo",
        description="Fallback Solana RPC URL",
    )
    rpc_timeout_seconds: float = Field(default=30.0, description="HTTP timeout per RPC call")
    confirm_timeout_seconds: float = Field(
        default=60.0, description="Max time to wait for a broadcast to confirm"
    )
    confirm_poll_interval_seconds: float = Field(
        default=2.0, description="Delay between confirmation status polls"
    )
    explorer_url: str = Field(default="https://solscan.io", description="Block explorer base URL")

    # ======================
    # Treasury / Token
    # ======================
    treasury_address: str = Field(
        default="APkBg8kzMBpVKxvgrw67vkd5KuGWqSu2GVb19eK4pump",
        description="Custodial relay address that receives exchanged SOL",
    )
    gold_token_mint: str = Field(
        default="APkBg8kzMBpVKxvgrw67vkd5KuGWqSu2GVb19eK4pump",
        description="GOLD SPL token mint",
    )

    # ======================
    # Exchange
    # ======================
    sol_to_gold_rate: Decimal = Field(
        default=Decimal("21486.893"), description="GOLD received per SOL"
    )
    gold_to_sol_rate: Decimal = Field(
        default=Decimal("0.0000465"), description="SOL received per GOLD"
    )
    fee_buffer_sol: Decimal = Field(
        default=Decimal("0.001"), description="SOL reserved for network fees"
    )
    max_swap_history: int = Field(default=20, description="Swap records kept in memory")

    # ======================
    # Balances
    # ======================
    default_sol_balance: Decimal = Field(
        default=Decimal("0.032454"), description="Balance shown when lookups fail"
    )
    treat_zero_as_unknown: bool = Field(
        default=True, description="Show the default balance when the ledger reports zero"
    )

    # ======================
    # Transaction History
    # ======================
    max_history_records: int = Field(default=20, description="Max records in the merged view")
    history_fetch_limit: int = Field(default=20, description="Signatures fetched per source")

    # ======================
    # Embedded Wallet
    # ======================
    embedded_wallet_secret: Optional[str] = Field(
        default=None,
        description="Embedded wallet key (base58 secret key or hex/base58 seed); generated if unset",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "rpc": {
                "primary": self.solana_rpc_url,
                "fallback": self._redact_url(self.solana_fallback_rpc_url),
                "timeout": self.rpc_timeout_seconds,
            },
            "treasury_address": self.treasury_address,
            "exchange": {
                "sol_to_gold_rate": str(self.sol_to_gold_rate),
                "gold_to_sol_rate": str(self.gold_to_sol_rate),
                "fee_buffer_sol": str(self.fee_buffer_sol),
            },
            "embedded_wallet": "***" if self.embedded_wallet_secret else "(generated)",
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact an API key embedded in the last path segment of an RPC URL."""
        if "/v2/" in url:
            base, _ = url.rsplit("/v2/", 1)
            return f"{base}/v2/***"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
