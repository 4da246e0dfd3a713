# parking_system_operations.py

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
import logging

import tariff_engine
from database import ParkingLedger
from errors import AlreadyClosed, NotFound
from models import ExitQuote, LotStatistics, ParkingRecord, VehicleType, to_cents

logger = logging.getLogger(__name__)


def format_money(amount: Optional[Decimal]) -> str:
    """Two fraction digits, the way amounts are stored and displayed."""
    if amount is None:
        return ""
    return f"{to_cents(Decimal(amount)):.2f}"


def format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}min"
    return f"{hours}h {mins}min"


# Entry and exit flows on top of the ledger and the tariff engine
class ParkingSystem:
    def __init__(self, ledger: ParkingLedger, clock: Callable[[], datetime] = datetime.now):
        self.ledger = ledger
        self.clock = clock

    def enter_vehicle(self, license_plate: str, vehicle_type: VehicleType) -> ParkingRecord:
        return self.ledger.create_record(license_plate, vehicle_type)

    def _open_record(self, record_id: str) -> ParkingRecord:
        record = self.ledger.get_by_id(record_id)
        if record is None:
            raise NotFound(record_id)
        if record.exit_time is not None:
            raise AlreadyClosed(record_id)
        return record

    # quote: read-only, may be repeated any number of times
    def quote_exit(self, record_id: str) -> ExitQuote:
        record = self._open_record(record_id)
        exit_time = self.clock()
        breakdown = tariff_engine.quote(
            record.entry_time, exit_time, record.vehicle_type, self.ledger.get_configuration()
        )
        return ExitQuote(
            vehicle_id=record.id,
            license_plate=record.license_plate,
            vehicle_type=record.vehicle_type,
            entry_time=record.entry_time,
            exit_time=exit_time,
            duration_display=format_duration(breakdown.duration_minutes),
            **breakdown.model_dump(),
        )

    # commit: recomputes against a fresh clock reading, not the quoted one
    def commit_exit(self, record_id: str) -> ParkingRecord:
        record = self._open_record(record_id)
        exit_time = self.clock()
        breakdown = tariff_engine.quote(
            record.entry_time, exit_time, record.vehicle_type, self.ledger.get_configuration()
        )
        closed = self.ledger.close_record(record_id, exit_time, breakdown.total_amount)
        logger.info(
            "Exit committed for %s: %s min, total %s",
            closed.license_plate,
            breakdown.duration_minutes,
            format_money(breakdown.total_amount),
        )
        return closed

    def statistics(self) -> LotStatistics:
        active = self.ledger.list_active()
        history = self.ledger.list_history()
        revenue = sum((r.amount_charged for r in history), Decimal("0.00"))
        return LotStatistics(
            active_cars=len([r for r in active if r.vehicle_type == VehicleType.car]),
            active_bikes=len([r for r in active if r.vehicle_type == VehicleType.bike]),
            closed_records=len(history),
            total_revenue=to_cents(revenue),
        )
