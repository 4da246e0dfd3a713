# config.py

from dataclasses import dataclass, field
from typing import List
import os

from pydantic import ValidationError as PydanticValidationError

from errors import InvalidConfiguration
from models import TariffConfiguration


def _origins() -> List[str]:
    raw = os.getenv("PARKING_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Process settings, read once from the environment at import time."""

    log_level: str = os.getenv("PARKING_LOG_LEVEL", "INFO").upper()
    hourly_rate_car: str = os.getenv("PARKING_HOURLY_RATE_CAR", "1.00")
    hourly_rate_bike: str = os.getenv("PARKING_HOURLY_RATE_BIKE", "0.50")
    overnight_fee_car: str = os.getenv("PARKING_OVERNIGHT_FEE_CAR", "10.00")
    overnight_fee_bike: str = os.getenv("PARKING_OVERNIGHT_FEE_BIKE", "5.00")
    free_minutes: str = os.getenv("PARKING_FREE_MINUTES", "15")
    cors_origins: List[str] = field(default_factory=_origins)


SETTINGS = Settings()


def default_tariff(settings: Settings = SETTINGS) -> TariffConfiguration:
    """Tariff the ledger starts with."""
    try:
        return TariffConfiguration.model_validate(
            {
                "hourly_rate_car": settings.hourly_rate_car,
                "hourly_rate_bike": settings.hourly_rate_bike,
                "overnight_fee_car": settings.overnight_fee_car,
                "overnight_fee_bike": settings.overnight_fee_bike,
                "free_minutes": settings.free_minutes,
            }
        )
    except PydanticValidationError as exc:
        raise InvalidConfiguration(f"Bad default tariff in environment: {exc}") from exc
