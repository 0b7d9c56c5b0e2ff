"""Runtime settings for the commerce service.

Values come from the environment (prefix ``CARTFLOW_``) or a ``.env`` file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="CARTFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Cartflow API"

    # Admission limiter
    rate_limit_requests: int = 60
    rate_limit_window_seconds: float = 60.0
    rate_limited_prefixes: list[str] = [
        "/api/auth/login",
        "/api/products",
        "/api/orders",
        "/api/payments",
    ]

    # Order status auto-advance
    ship_after_seconds: int = 15
    deliver_after_seconds: int = 60
    delivery_estimate_days: int = 3

    # Payments
    default_payment_provider: str = "STRIPE"
    checkout_base_url: str = "https://checkout.cartflow.local"

    # Notifications
    notification_sender: str = "no-reply@cartflow.local"
    notification_fallback_address: str = "orders@cartflow.local"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
