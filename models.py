from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Union


class VehicleCategory(Enum):
    CAR = "CAR"
    BIKE = "BIKE"

    @property
    def slot_prefix(self) -> str:
        return self.value[0]

    @classmethod
    def parse(cls, raw: str) -> "VehicleCategory":
        if not isinstance(raw, str):
            raise ValueError(f"Vehicle type must be a string, got {type(raw).__name__}.")
        name = raw.strip().upper()
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown vehicle type: {raw!r}. Use CAR or BIKE.") from None


def normalize_registration(raw: str) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"Registration must be a string, got {type(raw).__name__}.")
    reg = raw.strip().upper()
    if not reg:
        raise ValueError("Registration cannot be empty.")
    return reg


@dataclass(frozen=True)
class Vehicle:
    registration_number: str
    category: VehicleCategory


@dataclass
class Slot:
    slot_id: str
    sequence: int        # 1-based, lower is nearer
    category: VehicleCategory
    occupied: bool = False


@dataclass(frozen=True)
class Ticket:
    ticket_id: str
    vehicle: Vehicle
    slot_id: str         # resolved through ParkingLot.get_slot
    entry_time: datetime

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "registration": self.vehicle.registration_number,
            "category": self.vehicle.category.value,
            "slot_id": self.slot_id,
            "entry_time": self.entry_time.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class Occupancy:
    car_occupied: int
    car_total: int
    bike_occupied: int
    bike_total: int

    def to_dict(self) -> dict:
        return {
            "car_occupied": self.car_occupied,
            "car_total": self.car_total,
            "bike_occupied": self.bike_occupied,
            "bike_total": self.bike_total,
        }


@dataclass(frozen=True)
class ExitReceipt:
    ticket: Ticket
    exit_time: datetime
    minutes_parked: int
    amount: Decimal

    def to_dict(self) -> dict:
        data = self.ticket.to_dict()
        data.update(
            exit_time=self.exit_time.isoformat(timespec="seconds"),
            minutes_parked=self.minutes_parked,
            amount=f"{self.amount:.2f}",
        )
        return data


# -------------------------
# Business outcomes (returned, never raised)
# -------------------------
@dataclass(frozen=True)
class AlreadyParked:
    existing_ticket_id: str


@dataclass(frozen=True)
class LotFull:
    category: VehicleCategory


@dataclass(frozen=True)
class NotFound:
    key: str


EntryResult = Union[Ticket, AlreadyParked, LotFull]
