# models.py

from sqlmodel import SQLModel, Field
from pydantic import field_validator
from typing import Optional
from enum import Enum
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re
import uuid


CENTS = Decimal("0.01")
PLATE_PATTERN = re.compile(r"^[A-Z]{3}-[0-9][A-Z0-9][0-9]{2}$")


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _money_field(value: Decimal) -> Decimal:
    try:
        return to_cents(value)
    except InvalidOperation:
        raise ValueError("Amount is too large")


def _new_id() -> str:
    return str(uuid.uuid4())


# Vehicle classes
class VehicleType(str, Enum):
    car = "car"
    bike = "bike"


# Entry request (plate + class)
class VehicleEntryCreate(SQLModel):
    license_plate: str
    vehicle_type: VehicleType

    @field_validator("license_plate")
    @classmethod
    def check_plate(cls, value: str) -> str:
        if not PLATE_PATTERN.fullmatch(value):
            raise ValueError("License plate must be in the format AAA-0000 or AAA-0A00")
        return value


# One stay in the lot; active while exit_time is None
class ParkingRecord(SQLModel):
    id: str = Field(default_factory=_new_id)
    license_plate: str
    vehicle_type: VehicleType
    entry_time: datetime
    exit_time: Optional[datetime] = None
    amount_charged: Optional[Decimal] = None

    @property
    def is_active(self) -> bool:
        return self.exit_time is None


# Current rates and grace period
class TariffConfiguration(SQLModel):
    hourly_rate_car: Decimal = Field(default=Decimal("1.00"), ge=0)
    hourly_rate_bike: Decimal = Field(default=Decimal("0.50"), ge=0)
    overnight_fee_car: Decimal = Field(default=Decimal("10.00"), ge=0)
    overnight_fee_bike: Decimal = Field(default=Decimal("5.00"), ge=0)
    free_minutes: int = Field(default=15, ge=0)

    @field_validator(
        "hourly_rate_car", "hourly_rate_bike", "overnight_fee_car", "overnight_fee_bike"
    )
    @classmethod
    def round_money(cls, value: Decimal) -> Decimal:
        return _money_field(value)


# Settings update; omitted fields keep their current value
class TariffUpdate(SQLModel):
    hourly_rate_car: Optional[Decimal] = Field(default=None, ge=0)
    hourly_rate_bike: Optional[Decimal] = Field(default=None, ge=0)
    overnight_fee_car: Optional[Decimal] = Field(default=None, ge=0)
    overnight_fee_bike: Optional[Decimal] = Field(default=None, ge=0)
    free_minutes: Optional[int] = Field(default=None, ge=0)

    @field_validator(
        "hourly_rate_car", "hourly_rate_bike", "overnight_fee_car", "overnight_fee_bike"
    )
    @classmethod
    def round_money(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return None
        return _money_field(value)

    @field_validator("free_minutes", mode="before")
    @classmethod
    def reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("Free minutes must be an integer")
        return value


# Result of the tariff engine (never stored)
class FeeBreakdown(SQLModel):
    duration_minutes: int
    chargeable_minutes: int
    hourly_rate: Decimal
    base_charge: Decimal
    overnight_fee: Decimal
    total_amount: Decimal
    had_overnight: bool


# Quote shown before the exit is committed
class ExitQuote(FeeBreakdown):
    vehicle_id: str
    license_plate: str
    vehicle_type: VehicleType
    entry_time: datetime
    exit_time: datetime
    duration_display: str


class LotStatistics(SQLModel):
    active_cars: int
    active_bikes: int
    closed_records: int
    total_revenue: Decimal
