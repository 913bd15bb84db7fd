"""
order_ledger.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide credentials embedded in the connection string from repr/logging.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from order_ledger.db.ledger import Durability, Isolation, TransactionOptions


class Settings(BaseSettings):
    """
    - Strict env-driven configuration (prefix `ORDER_LEDGER_`)
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="ORDER_LEDGER_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "order-ledger"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 9090

    # Persistence: the single connection string configuring the store endpoint.
    database_url: str = Field(default="sqlite+aiosqlite:///./ledger.db", repr=False)
    # Create tables on startup. Deployments with a pre-provisioned schema turn this off.
    create_schema: bool = True

    # Order placement transaction options.
    transaction_isolation: Isolation = Isolation.snapshot
    transaction_durability: Durability = Durability.majority

    def transaction_options(self) -> TransactionOptions:
        return TransactionOptions(
            isolation=self.transaction_isolation,
            durability=self.transaction_durability,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Settings are read once at process start; the store handle built from them is
# long-lived and shared by every request handler.
