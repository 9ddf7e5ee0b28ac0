"""POS Checkout Configuration"""

from decimal import Decimal
from typing import Literal, Optional
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="POS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "POS Checkout"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Backend (catalog + order service)
    backend: Literal["http", "memory"] = "http"
    api_base_url: str = "http://localhost:3000/api"
    api_token: Optional[str] = None
    request_timeout: float = 30.0

    # Pricing policy
    tax_rate: Decimal = Field(default=Decimal("0.10"), ge=0, le=1)
    currency: str = "VND"
    default_payment_method: str = "CASH"
    custom_item_stock: int = Field(default=9999, gt=0)

    @property
    def memory_backend(self) -> bool:
        """Whether the in-process catalog/order service is used"""
        return self.backend == "memory"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
