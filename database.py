# database.py

from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Union
import logging
import threading

from pydantic import ValidationError as PydanticValidationError

from config import default_tariff
from errors import AlreadyClosed, NotFound, ValidationError
from models import (
    ParkingRecord,
    TariffConfiguration,
    TariffUpdate,
    VehicleEntryCreate,
    VehicleType,
    to_cents,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class ParkingLedger:
    """
    In-memory registry of parking records plus the current tariff.

    Mutations run under one lock so an exit can only be recorded once and
    exit_time/amount_charged always appear together. Stored records are
    replaced, never edited in place, and callers always get copies.
    """

    def __init__(self, config: Optional[TariffConfiguration] = None, clock: Clock = datetime.now):
        self._records: Dict[str, ParkingRecord] = {}
        self._config = config if config is not None else TariffConfiguration()
        self._clock = clock
        self._lock = threading.RLock()

    # Vehicles

    def create_record(self, license_plate: str, vehicle_type: Union[VehicleType, str]) -> ParkingRecord:
        try:
            entry = VehicleEntryCreate.model_validate(
                {"license_plate": license_plate, "vehicle_type": vehicle_type}
            )
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

        with self._lock:
            record = ParkingRecord(
                license_plate=entry.license_plate,
                vehicle_type=entry.vehicle_type,
                entry_time=self._clock(),
            )
            self._records[record.id] = record

        logger.info("Vehicle %s (%s) entered, record %s", record.license_plate, record.vehicle_type.value, record.id)
        return record.model_copy()

    def get_by_id(self, record_id: str) -> Optional[ParkingRecord]:
        with self._lock:
            record = self._records.get(record_id)
        return record.model_copy() if record is not None else None

    def list_active(self) -> List[ParkingRecord]:
        with self._lock:
            active = [r for r in self._records.values() if r.exit_time is None]
        active.sort(key=lambda r: r.entry_time, reverse=True)
        return [r.model_copy() for r in active]

    def list_history(self) -> List[ParkingRecord]:
        with self._lock:
            closed = [r for r in self._records.values() if r.exit_time is not None]
        closed.sort(key=lambda r: r.exit_time, reverse=True)
        return [r.model_copy() for r in closed]

    def close_record(self, record_id: str, exit_time: datetime, amount_charged: Decimal) -> ParkingRecord:
        amount = to_cents(Decimal(amount_charged))
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                logger.warning("Exit refused: record %s not found", record_id)
                raise NotFound(record_id)
            if record.exit_time is not None:
                logger.warning("Exit refused: record %s already closed at %s", record_id, record.exit_time)
                raise AlreadyClosed(record_id)

            closed = record.model_copy(update={"exit_time": exit_time, "amount_charged": amount})
            self._records[record_id] = closed

        logger.info("Vehicle %s left, record %s charged %s", closed.license_plate, record_id, amount)
        return closed.model_copy()

    # Settings

    def get_configuration(self) -> TariffConfiguration:
        with self._lock:
            return self._config.model_copy()

    def update_configuration(self, partial: Union[TariffUpdate, dict]) -> TariffConfiguration:
        try:
            if isinstance(partial, TariffUpdate):
                partial = partial.model_dump(exclude_unset=True)
            update = TariffUpdate.model_validate(partial)
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        with self._lock:
            self._config = self._config.model_copy(update=changes)
            config = self._config.model_copy()

        logger.info("Tariff updated: %s", ", ".join(sorted(changes)) or "no changes")
        return config


# Process-wide ledger, created with the configured default tariff
ledger = ParkingLedger(config=default_tariff())


def get_ledger() -> ParkingLedger:
    return ledger
