"""AO MCP server configuration.

Network constants are fixed and used by tool defaults and descriptions.
Unit endpoints and client tuning come from environment variables
(``AO_MCP_`` prefix) and are loaded once.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ao_mcp.connect.client import DEFAULT_CU_URL, DEFAULT_MU_URL


class AOConfig(BaseModel):
    """AO network constants."""

    model_config = ConfigDict(frozen=True)

    # aos WASM module (Lua 5.3 runtime)
    aos_module: str = "Do_Uc2Sju_ffp6Ev0AnLVdPtot15rvMjP-a9VVaA5fM"
    # AO mainnet scheduler
    scheduler: str = "_GQ33BkPtZrqxA84vM8Zk-N2aO0toNNu_C-l-rawrBA"
    # Forge Chamber, a public process handy for trying queries
    chamber_pid: str = "4Kg8kj1SZPPMNOskIY0TlCfhJri8XEHsSAE8j-k0FOA"


class ServerInfo(BaseModel):
    """MCP server metadata."""

    model_config = ConfigDict(frozen=True)

    name: str = "ao-mcp-server"
    version: str = "1.0.0"
    description: str = (
        "MCP server for AO/Arweave - query processes, send messages, "
        "spawn processes, execute Lua"
    )


AO_CONFIG = AOConfig()
SERVER_INFO = ServerInfo()

PROCESS_ID_LENGTH = 43


class Settings(BaseSettings):
    """Network client settings."""

    model_config = SettingsConfigDict(
        env_prefix="AO_MCP_",
        case_sensitive=False,
    )

    cu_url: str = DEFAULT_CU_URL
    mu_url: str = DEFAULT_MU_URL
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0, le=10)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
