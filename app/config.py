import os

from pathlib import Path
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Ensure we pick up legacy environment variable aliases."""

        super().model_post_init(__context)

        if not self.rpc_url:
            fallback = os.getenv("NETWORK_RPC") or os.getenv("ETH_RPC_URL")
            if fallback:
                object.__setattr__(self, "rpc_url", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Execution layer
    rpc_url: str = Field(default="", description="JSON-RPC endpoint of the execution layer")
    rpc_timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request RPC timeout")
    chain_id: Optional[int] = Field(
        default=None,
        description="Chain ID to sign for; fetched with eth_chainId when unset",
    )

    # Controlled account
    private_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("private_key", "relayer_private_key"),
        description="Hex private key of the account the relay signs for",
    )

    # Contracts
    registration_address: str = Field(
        default="",
        description="Address of the registration contract",
    )
    relayer_target_address: Optional[str] = Field(
        default=None,
        description="Target of relayed create-account payloads; unset deploys the payload",
    )

    # Submission
    gas_multiplier: float = Field(default=1.1, ge=1.0, description="Safety margin on estimated gas")
    submission_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Deadline for a whole submission, lock wait included",
    )
    nonce_error_codes: List[int] = Field(
        default_factory=list,
        description="JSON-RPC error codes the node uses for nonce conflicts",
    )
    nonce_block_tag: str = Field(
        default="pending",
        description="Block tag used when resynchronizing the nonce",
    )

    @property
    def has_private_key(self) -> bool:
        return bool(self.private_key.get_secret_value())

    @property
    def has_rpc_url(self) -> bool:
        return bool(self.rpc_url)


# Global settings instance
settings = Settings()
