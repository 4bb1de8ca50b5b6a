import os
from typing import Mapping, Optional, Tuple

from .errors import ConfigError

PRODUCTION_BASE_URL = "https://api-gateway.transak.com"
STAGING_BASE_URL = "https://api-gateway-stg.transak.com"


def _split_csv(val: str) -> list[str]:
    """
    Returns a list from a comma separated value.
    Example: "https://a.example,https://b.example" -> ["https://a.example", "https://b.example"]
    """
    # a bare "*" means open CORS
    if val.strip() == "*":
        return ["*"]
    return [s.strip() for s in val.split(",") if s.strip()]


def mask_secret(value: str, visible: int = 4) -> str:
    if not value:
        return "<unset>"
    return value[:visible] + "***"


class Settings:
    def __init__(
        self,
        *,
        api_key: str = "",
        api_secret: str = "",
        environment: str = "STAGING",
        allowed_origins: str = "*",
        env: str = "production",
        http_timeout: float = 30.0,
        log_level: str = "INFO",
        widget_api_base_url: str = "http://localhost:8000",
    ):
        # Transak
        self.api_key = api_key.strip()
        self.api_secret = api_secret.strip()
        self.environment = "PRODUCTION" if environment.strip().upper() == "PRODUCTION" else "STAGING"
        self.http_timeout = http_timeout

        # App/infra
        self.env = env.strip().lower()
        self.log_level = log_level.upper()
        self.allowed_origins = allowed_origins

        # Front-end -> API
        self.widget_api_base_url = widget_api_base_url.rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("TRANSAK_API_KEY", ""),
            api_secret=env.get("TRANSAK_API_SECRET", ""),
            environment=env.get("TRANSAK_ENVIRONMENT", "STAGING"),
            allowed_origins=env.get("ALLOWED_ORIGINS", "*"),
            env=env.get("ENV", "production"),
            http_timeout=float(env.get("TRANSAK_HTTP_TIMEOUT", "30")),
            log_level=env.get("LOG_LEVEL", "INFO"),
            widget_api_base_url=env.get("WIDGET_API_BASE_URL", "http://localhost:8000"),
        )

    @property
    def transak_base_url(self) -> str:
        return PRODUCTION_BASE_URL if self.environment == "PRODUCTION" else STAGING_BASE_URL

    @property
    def cors_origins(self) -> list[str]:
        return _split_csv(self.allowed_origins)

    @property
    def expose_errors(self) -> bool:
        return self.env == "development"

    @property
    def credentials_configured(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError("TRANSAK_API_KEY environment variable is required")
        return self.api_key

    def require_credentials(self) -> Tuple[str, str]:
        if not self.api_key or not self.api_secret:
            raise ConfigError("Missing required environment variables: TRANSAK_API_KEY or TRANSAK_API_SECRET")
        return self.api_key, self.api_secret

    def __repr__(self) -> str:
        return (
            f"Settings(environment={self.environment!r}, env={self.env!r}, "
            f"api_key={mask_secret(self.api_key)!r}, allowed_origins={self.allowed_origins!r})"
        )
