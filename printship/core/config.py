"""
Application configuration

Courier credentials default to empty strings. A live courier with missing
credentials reports itself unavailable for quoting instead of failing
startup, so the engine always boots with the formula couriers at minimum.
"""
import json
import logging
from typing import List, Optional, Union

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App
    APP_NAME: str = "PrintShip Shipping Engine"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS - accepts JSON array or comma-separated string
    CORS_ORIGINS: Union[str, List[str]] = DEFAULT_CORS_ORIGINS

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            if not v or v.strip() == "":
                return DEFAULT_CORS_ORIGINS
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Rate limiting on the quote endpoint (each request fans out to stores x couriers)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_QUOTE: str = "60/minute"

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 30.0
    # Per-call bound on a single courier quote. None keeps the unbounded wait.
    QUOTE_TIMEOUT_SECONDS: Optional[float] = None

    # Shipyaari (Blaze V2)
    SHIPYAARI_BASE_URL: str = "https://api-seller.shipyaari.com"
    SHIPYAARI_AUTH_TOKEN: str = ""

    # Shipway
    SHIPWAY_BASE_URL: str = "https://app.shipway.com"
    SHIPWAY_EMAIL: str = ""
    SHIPWAY_LICENSE_KEY: str = ""

    # Shift
    SHIFT_BASE_URL: str = "https://carrier.shift.in"
    SHIFT_USERNAME: str = ""
    SHIFT_PASSWORD: str = ""

    # Shipmozo
    SHIPMOZO_BASE_URL: str = "https://shipping-api.com/app/api/v1"
    SHIPMOZO_PUBLIC_KEY: str = ""
    SHIPMOZO_PRIVATE_KEY: str = ""

    # Ekart (Elite Ekart Logistics)
    EKART_BASE_URL: str = "https://app.elite.ekartlogistics.in"
    EKART_CLIENT_ID: str = ""
    EKART_USERNAME: str = ""
    EKART_PASSWORD: str = ""
    EKART_TOKEN_TTL_SECONDS: int = 86400
    TOKEN_CACHE_SAFETY_MARGIN_SECONDS: int = 3600

    # Default pickup address for shipments that do not carry one
    ORIGIN_PICKUP_NAME: str = "PrintShip Store"
    ORIGIN_PICKUP_PHONE: str = "9876543210"
    ORIGIN_PICKUP_PINCODE: str = "110001"
    ORIGIN_PICKUP_ADDRESS: str = "New Delhi, India"

    @model_validator(mode="after")
    def validate_token_margin(self):
        """The token cache margin must leave a positive Ekart cache lifetime."""
        if self.TOKEN_CACHE_SAFETY_MARGIN_SECONDS >= self.EKART_TOKEN_TTL_SECONDS:
            raise ValueError(
                "TOKEN_CACHE_SAFETY_MARGIN_SECONDS must be smaller than EKART_TOKEN_TTL_SECONDS"
            )
        return self


settings = Settings()
