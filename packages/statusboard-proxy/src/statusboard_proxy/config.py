"""Environment-based configuration for the status proxy."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Status proxy configuration.

    All settings can be overridden via environment variables with
    STATUSBOARD_PROXY_ prefix. For example:
        STATUSBOARD_PROXY_PORT=8080
        STATUSBOARD_PROXY_QUERY_TIMEOUT_SECONDS=3
    """

    # HTTP listener
    host: str = "0.0.0.0"
    port: int = 3001

    # Game server queries
    query_timeout_seconds: float = 5.0
    java_default_port: int = 25565
    bedrock_default_port: int = 19132

    model_config = {"env_prefix": "STATUSBOARD_PROXY_"}


settings = Settings()
