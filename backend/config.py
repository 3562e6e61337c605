"""
Configuration management for the Stellar XLM Blink service.

Loads settings from environment / .env via pydantic-settings and resolves
the selected ledger network into an immutable NetworkConfig.
"""
import logging
from dataclasses import dataclass, replace

from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.enums import StellarNetwork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkConfig:
    """Fixed parameters of one Stellar network."""

    name: str
    horizon_url: str
    passphrase: str
    blockchain_id: str  # CAIP-2 identifier advertised in x-blockchain-ids


NETWORKS: dict[StellarNetwork, NetworkConfig] = {
    StellarNetwork.TESTNET: NetworkConfig(
        name=StellarNetwork.TESTNET.value,
        horizon_url="https://horizon-testnet.stellar.org",
        passphrase="Test SDF Network ; September 2015",
        blockchain_id="stellar:2",
    ),
    StellarNetwork.MAINNET: NetworkConfig(
        name=StellarNetwork.MAINNET.value,
        horizon_url="https://horizon.stellar.org",
        passphrase="Public Global Stellar Network ; September 2015",
        blockchain_id="stellar:1",
    ),
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Stellar ─────────────────────────────────────────────────────
    stellar_network: StellarNetwork = StellarNetwork.TESTNET
    horizon_url: str = ""  # overrides the network's fixed Horizon URL

    # ── Server ──────────────────────────────────────────────────────
    port: int = 3001
    environment: str = "development"
    log_level: str = "INFO"

    # ── CORS ────────────────────────────────────────────────────────
    cors_origin: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def network(self) -> NetworkConfig:
        """Resolve the configured network, applying HORIZON_URL if set."""
        network = NETWORKS[self.stellar_network]
        if self.horizon_url:
            network = replace(network, horizon_url=self.horizon_url.rstrip("/"))
        return network

    def validate_settings(self):
        """
        Sanity-check settings before the app starts serving.

        Called from the app lifespan.
        """
        if self.horizon_url and not self.horizon_url.startswith(("http://", "https://")):
            raise ValueError(
                f"HORIZON_URL must be an http(s) URL, got {self.horizon_url!r}"
            )

        if self.environment == "production":
            warnings = []
            if self.cors_origin == "*":
                warnings.append("CORS_ORIGIN is '*' (any site may embed this Blink)")
            if self.stellar_network == StellarNetwork.TESTNET:
                warnings.append("STELLAR_NETWORK=testnet in production")
            for w in warnings:
                logger.warning(w)


# Global settings instance
settings = Settings()
