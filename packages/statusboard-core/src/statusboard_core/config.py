"""Environment-based configuration for the status board."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

StatusPolicyName = Literal["fallback", "race", "retry"]
LatencyMethod = Literal["tcp", "minetools"]


class Settings(BaseSettings):
    """Status board configuration.

    All settings can be overridden via environment variables with
    STATUSBOARD_ prefix. For example:
        STATUSBOARD_PROXY_URL=https://mc.example.com
        STATUSBOARD_STATUS_POLICY=race
        STATUSBOARD_STATUS_SOURCES='["mcsrvstat", "mcapi"]'
    """

    # Server list
    config_path: Path = Path("config.json")

    # Status data sources, tried in this order
    proxy_url: str = "http://localhost:3001"
    status_sources: list[str] = ["proxy", "mcsrvstat", "mcapi", "minetools"]
    status_policy: StatusPolicyName = "fallback"
    source_timeout_seconds: float | None = None  # None = policy default
    retry_attempts: int = 3
    retry_delay_seconds: float = 0.5

    # Latency probe
    latency_method: LatencyMethod = "tcp"
    latency_timeout_seconds: float = 2.5
    latency_samples: int = 3
    fallback_latency_port: int = 80

    # Refresh countdown
    refresh_interval_seconds: float = 60.0

    log_level: str = "INFO"

    model_config = {"env_prefix": "STATUSBOARD_"}
