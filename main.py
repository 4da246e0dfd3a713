#main.py
from fastapi import FastAPI, Depends, Body, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from config import SETTINGS
from database import ParkingLedger, get_ledger
from errors import AlreadyClosed, InvalidConfiguration, NotFound, ValidationError
from parking_system_operations import ParkingSystem

logger = logging.getLogger(__name__)

app = FastAPI(title="Parking Lot Fee Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    logging.basicConfig(
        level=SETTINGS.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Parking service started")


def get_parking_system(ledger: ParkingLedger = Depends(get_ledger)) -> ParkingSystem:
    return ParkingSystem(ledger)


# Error responses

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"message": str(exc), "errors": exc.errors})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(AlreadyClosed)
async def already_closed_handler(request: Request, exc: AlreadyClosed):
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(InvalidConfiguration)
async def invalid_configuration_handler(request: Request, exc: InvalidConfiguration):
    logger.error("Tariff misconfigured: %s", exc)
    return JSONResponse(status_code=500, content={"message": str(exc)})


# 1. Register a vehicle entering the lot
@app.post("/api/vehicles", status_code=201)
def create_vehicle(payload: dict = Body(...), system: ParkingSystem = Depends(get_parking_system)):
    return system.enter_vehicle(payload.get("license_plate"), payload.get("vehicle_type"))


# 2. Vehicles currently parked, newest arrival first
@app.get("/api/vehicles/active")
def active_vehicles(ledger: ParkingLedger = Depends(get_ledger)):
    return ledger.list_active()


@app.get("/api/vehicles/{vehicle_id}")
def get_vehicle(vehicle_id: str, ledger: ParkingLedger = Depends(get_ledger)):
    record = ledger.get_by_id(vehicle_id)
    if record is None:
        raise NotFound(vehicle_id)
    return record


# 3. Quote the fee if the vehicle left now (nothing is saved)
@app.get("/api/vehicles/{vehicle_id}/calculate")
def calculate_exit(vehicle_id: str, system: ParkingSystem = Depends(get_parking_system)):
    return system.quote_exit(vehicle_id)


# 4. Register the exit and charge the vehicle
@app.post("/api/vehicles/{vehicle_id}/exit")
def exit_vehicle(vehicle_id: str, system: ParkingSystem = Depends(get_parking_system)):
    return system.commit_exit(vehicle_id)


# 5. Closed records, latest departure first
@app.get("/api/history")
def history(ledger: ParkingLedger = Depends(get_ledger)):
    return ledger.list_history()


# 6. Tariff settings
@app.get("/api/settings")
def get_settings(ledger: ParkingLedger = Depends(get_ledger)):
    return ledger.get_configuration()


@app.put("/api/settings")
def update_settings(payload: dict = Body(...), ledger: ParkingLedger = Depends(get_ledger)):
    return ledger.update_configuration(payload)


# 7. Occupancy and revenue
@app.get("/api/statistics")
def statistics(system: ParkingSystem = Depends(get_parking_system)):
    return {"status": "success", "data": system.statistics()}
