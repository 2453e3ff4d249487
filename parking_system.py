from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Union

from audit_log import AuditLog
from fee_calculator import FeeCalculator
from models import (
    EntryResult,
    ExitReceipt,
    NotFound,
    Occupancy,
    Ticket,
    Vehicle,
    VehicleCategory,
    normalize_registration,
)
from parking_lot import ParkingLot

logger = logging.getLogger(__name__)


class ParkingSystem:
    """
    Front desk of the parking lot.

    - entry: validate raw input, hand a Vehicle to the lot
    - exit: look up by registration, bill, then release the slot
    - every successful entry/exit is written to the audit trail
    """

    def __init__(
        self,
        lot: ParkingLot,
        calculator: Optional[FeeCalculator] = None,
        clock: Callable[[], datetime] = datetime.now,
        audit: Optional[AuditLog] = None,
    ) -> None:
        self.lot = lot
        self.calculator = calculator or FeeCalculator()
        self.clock = clock
        self.audit = audit

    # -------------------------
    # Entry
    # -------------------------
    def enter(self, registration: str, category: Union[str, VehicleCategory]) -> EntryResult:
        if not isinstance(category, VehicleCategory):
            category = VehicleCategory.parse(category)
        vehicle = Vehicle(normalize_registration(registration), category)

        result = self.lot.entry_vehicle(vehicle)
        if isinstance(result, Ticket):
            logger.info("Vehicle %s parked at %s (%s)", vehicle.registration_number, result.slot_id, result.ticket_id)
            if self.audit is not None:
                self.audit.record_entry(result)
        else:
            logger.info("Entry refused for %s: %s", vehicle.registration_number, result)
        return result

    # -------------------------
    # Exit
    # -------------------------
    def check_out(self, registration: str) -> Union[ExitReceipt, NotFound]:
        reg = normalize_registration(registration)
        ticket = self.lot.find_active_ticket_by_reg(reg)
        if isinstance(ticket, NotFound):
            logger.info("No active ticket for %s", reg)
            return ticket

        # bill against the live entry time before the ticket is retired
        exit_time = self.clock()
        # whole minutes, truncated toward zero
        minutes = int((exit_time - ticket.entry_time).total_seconds() / 60)
        amount = self.calculator.calculate_fee(ticket.vehicle.category, minutes)

        if self.lot.exit_vehicle(ticket.ticket_id) is None:
            # retired by someone else since the lookup
            logger.info("Ticket %s already closed, nothing billed", ticket.ticket_id)
            return NotFound(key=reg)

        receipt = ExitReceipt(ticket=ticket, exit_time=exit_time, minutes_parked=minutes, amount=amount)
        logger.info("Vehicle %s left %s after %d min, due %.2f", reg, ticket.slot_id, minutes, amount)
        if self.audit is not None:
            self.audit.record_exit(receipt)
        return receipt

    # -------------------------
    # Status
    # -------------------------
    def reset(self, car_slots: int, bike_slots: int) -> None:
        self.lot.reset(car_slots, bike_slots)
        logger.info("Parking lot reset: %d car slots, %d bike slots", car_slots, bike_slots)

    def get_occupancy(self) -> Occupancy:
        return self.lot.occupancy()

    def list_active_tickets(self) -> list[Ticket]:
        return self.lot.active_tickets()
