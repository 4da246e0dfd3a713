# tariff_engine.py
"""
Fee calculation for a single stay.

Pure functions only: nothing here reads the clock or touches the ledger.
Callers pass both timestamps explicitly, so quoting the same stay twice
always gives the same answer.
"""

from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
import math

from errors import InvalidConfiguration
from models import FeeBreakdown, TariffConfiguration, VehicleType, to_cents


ZERO = Decimal("0.00")
MINUTE = timedelta(minutes=1)


def duration_minutes(entry_time: datetime, exit_time: datetime) -> int:
    """Whole minutes between entry and exit, truncated."""
    return (exit_time - entry_time) // MINUTE


def chargeable_hours(chargeable_minutes: int) -> int:
    # any started hour is billed in full
    if chargeable_minutes <= 0:
        return 0
    return math.ceil(chargeable_minutes / 60)


def had_overnight(entry_time: datetime, exit_time: datetime) -> bool:
    """True when the stay crosses a calendar date, however short it is."""
    return entry_time.date() != exit_time.date()


def _money(config: TariffConfiguration, name: str) -> Decimal:
    raw = getattr(config, name, None)
    if raw is None:
        raise InvalidConfiguration(f"Tariff field {name} is missing")
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        raise InvalidConfiguration(f"Tariff field {name} is not a number: {raw!r}")
    if not value.is_finite() or value < 0:
        raise InvalidConfiguration(f"Tariff field {name} must be a non-negative number: {raw!r}")
    return value


def _free_minutes(config: TariffConfiguration) -> int:
    raw = getattr(config, "free_minutes", None)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise InvalidConfiguration(f"Tariff field free_minutes must be a non-negative integer: {raw!r}")
    return raw


def quote(
    entry_time: datetime,
    exit_time: datetime,
    vehicle_type: VehicleType,
    config: TariffConfiguration,
) -> FeeBreakdown:
    vehicle_type = VehicleType(vehicle_type)
    hourly_rate = _money(config, f"hourly_rate_{vehicle_type.value}")
    overnight_rate = _money(config, f"overnight_fee_{vehicle_type.value}")
    free_minutes = _free_minutes(config)

    minutes = duration_minutes(entry_time, exit_time)
    chargeable = max(0, minutes - free_minutes)
    base_charge = chargeable_hours(chargeable) * hourly_rate

    overnight = had_overnight(entry_time, exit_time)
    overnight_fee = overnight_rate if overnight else ZERO

    try:
        amounts = {
            "hourly_rate": to_cents(hourly_rate),
            "base_charge": to_cents(base_charge),
            "overnight_fee": to_cents(overnight_fee),
            "total_amount": to_cents(base_charge + overnight_fee),
        }
    except InvalidOperation:
        raise InvalidConfiguration(f"Tariff for {vehicle_type.value} produces an amount too large to bill")

    return FeeBreakdown(
        duration_minutes=minutes,
        chargeable_minutes=chargeable,
        had_overnight=overnight,
        **amounts,
    )
