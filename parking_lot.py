from __future__ import annotations

import re
import threading
from datetime import datetime
from typing import Callable, Optional, Union

from heap_allocator import SlotHeap
from models import (
    AlreadyParked,
    EntryResult,
    LotFull,
    NotFound,
    Occupancy,
    Slot,
    Ticket,
    Vehicle,
    VehicleCategory,
)

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


class ParkingLot:
    """
    Slot inventory and ticket lifecycle of a single lot.

    - slots: ordered list per category, created once per configuration
    - free slots: per-category Min-Heap (nearest-first)
    - active tickets: ticket_id -> Ticket
    - reverse index: registration -> ticket_id (active tickets only)

    Ticket ids carry a sequence number that only ever grows for the
    lifetime of the instance, including across reset().
    """

    def __init__(
        self,
        car_slot_count: int,
        bike_slot_count: int,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._ticket_seq = 0

        self.slots: dict[VehicleCategory, list[Slot]] = {}
        self._free: dict[VehicleCategory, SlotHeap] = {}
        self._slot_index: dict[str, Slot] = {}
        self._active: dict[str, Ticket] = {}
        self._reg_to_ticket: dict[str, str] = {}

        self._configure(car_slot_count, bike_slot_count)

    # -------------------------
    # Configuration
    # -------------------------
    def reset(self, car_slot_count: int, bike_slot_count: int) -> None:
        """Drop every active ticket and rebuild the slot pools."""
        with self._lock:
            self._configure(car_slot_count, bike_slot_count)

    def _configure(self, car_slot_count: int, bike_slot_count: int) -> None:
        counts = {
            VehicleCategory.CAR: car_slot_count,
            VehicleCategory.BIKE: bike_slot_count,
        }
        for category, count in counts.items():
            if count < 0:
                raise ValueError(f"{category.value} slot count must be >= 0, got {count}")

        self.slots = {}
        self._free = {}
        self._slot_index = {}
        self._active = {}
        self._reg_to_ticket = {}

        for category, count in counts.items():
            heap = SlotHeap()
            pool = []
            for i in range(1, count + 1):
                slot = Slot(
                    slot_id=f"{category.slot_prefix}-{i:02d}",
                    sequence=i,
                    category=category,
                )
                pool.append(slot)
                heap.add_slot(slot)
                self._slot_index[slot.slot_id] = slot
            self.slots[category] = pool
            self._free[category] = heap

    # -------------------------
    # Entry / Exit
    # -------------------------
    def entry_vehicle(self, vehicle: Vehicle) -> EntryResult:
        with self._lock:
            existing = self._reg_to_ticket.get(vehicle.registration_number)
            if existing is not None:
                return AlreadyParked(existing_ticket_id=existing)

            slot = self._free[vehicle.category].pop_nearest()
            if slot is None:
                return LotFull(category=vehicle.category)

            slot.occupied = True
            ticket = Ticket(
                ticket_id=self._new_ticket_id(vehicle),
                vehicle=vehicle,
                slot_id=slot.slot_id,
                entry_time=self._clock(),
            )
            self._active[ticket.ticket_id] = ticket
            self._reg_to_ticket[vehicle.registration_number] = ticket.ticket_id
            return ticket

    def exit_vehicle(self, ticket_id: str) -> Optional[Ticket]:
        """
        Retire an active ticket and free its slot.
        Unknown or already-retired ids are a no-op and return None.
        """
        with self._lock:
            ticket = self._active.pop(ticket_id, None)
            if ticket is None:
                return None

            slot = self._slot_index[ticket.slot_id]
            slot.occupied = False
            self._free[slot.category].add_slot(slot)
            del self._reg_to_ticket[ticket.vehicle.registration_number]
            return ticket

    # -------------------------
    # Queries
    # -------------------------
    def find_active_ticket_by_reg(self, registration: str) -> Union[Ticket, NotFound]:
        ticket_id = self._reg_to_ticket.get(registration)
        if ticket_id is None:
            return NotFound(key=registration)
        return self._active[ticket_id]

    def get_slot(self, slot_id: str) -> Optional[Slot]:
        return self._slot_index.get(slot_id)

    def occupancy(self) -> Occupancy:
        def count(category: VehicleCategory) -> int:
            return sum(1 for s in self.slots[category] if s.occupied)

        return Occupancy(
            car_occupied=count(VehicleCategory.CAR),
            car_total=len(self.slots[VehicleCategory.CAR]),
            bike_occupied=count(VehicleCategory.BIKE),
            bike_total=len(self.slots[VehicleCategory.BIKE]),
        )

    def active_tickets(self) -> list[Ticket]:
        # dict keeps issuance order
        return list(self._active.values())

    # -------------------------
    # Internal
    # -------------------------
    def _new_ticket_id(self, vehicle: Vehicle) -> str:
        self._ticket_seq += 1
        short_reg = _NON_ALNUM.sub("", vehicle.registration_number.upper())[:4]
        return f"T{short_reg}{self._ticket_seq:03d}"
