from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """A required setting is missing; the affected route must fail closed."""


class Settings(BaseSettings):
    env: str = "development"

    stripe_secret_key: SecretStr | None = None
    stripe_webhook_secret: SecretStr | None = None
    # Stripe's documented default for signature timestamps
    webhook_tolerance: int = 300

    # Outbound URL for customer notifications; log-only when unset
    notification_url: str | None = None

    allowed_origins: str = (
        "https://yourdomain.com,https://www.yourdomain.com"  # Production origins
    )
    max_body_size: int = 1_048_576  # 1 MiB
    log_level: str = "INFO"
    port: int = 3000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def require_webhook_secret(self) -> str:
        if self.stripe_webhook_secret is None:
            raise ConfigError("STRIPE_WEBHOOK_SECRET is not configured")
        secret = self.stripe_webhook_secret.get_secret_value()
        if not secret:
            raise ConfigError("STRIPE_WEBHOOK_SECRET is not configured")
        return secret

    def require_stripe_key(self) -> str:
        if self.stripe_secret_key is None:
            raise ConfigError("STRIPE_SECRET_KEY is not configured")
        key = self.stripe_secret_key.get_secret_value()
        if not key:
            raise ConfigError("STRIPE_SECRET_KEY is not configured")
        return key


@lru_cache
def get_settings() -> Settings:
    return Settings()
