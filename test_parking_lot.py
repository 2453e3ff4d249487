import pytest

from models import AlreadyParked, LotFull, NotFound, Ticket, Vehicle, VehicleCategory
from parking_lot import ParkingLot

CAR = VehicleCategory.CAR
BIKE = VehicleCategory.BIKE


def car(reg):
    return Vehicle(reg, CAR)


def bike(reg):
    return Vehicle(reg, BIKE)


def test_initialisation(lot):
    assert [s.slot_id for s in lot.slots[CAR]] == ["C-01", "C-02", "C-03", "C-04", "C-05"]
    assert [s.slot_id for s in lot.slots[BIKE]] == ["B-01", "B-02", "B-03"]
    occ = lot.occupancy()
    assert (occ.car_occupied, occ.car_total, occ.bike_occupied, occ.bike_total) == (0, 5, 0, 3)


def test_negative_slot_count_is_rejected():
    with pytest.raises(ValueError):
        ParkingLot(-1, 3)


def test_zero_slots_is_always_full():
    lot = ParkingLot(0, 0)
    assert lot.entry_vehicle(car("KA01")) == LotFull(CAR)


@pytest.mark.parametrize("category,count", [(CAR, 5), (BIKE, 3)])
def test_capacity_is_exact(lot, category, count):
    for i in range(count):
        assert isinstance(lot.entry_vehicle(Vehicle(f"V{i}", category)), Ticket)

    assert lot.entry_vehicle(Vehicle("EXTRA", category)) == LotFull(category)
    assert lot.find_active_ticket_by_reg("EXTRA") == NotFound("EXTRA")


def test_entry_issues_ticket(lot, clock):
    ticket = lot.entry_vehicle(car("KA-01 AB 1234"))

    assert ticket.ticket_id == "TKA01001"
    assert ticket.slot_id == "C-01"
    assert ticket.entry_time == clock.now
    assert lot.get_slot("C-01").occupied
    assert lot.find_active_ticket_by_reg("KA-01 AB 1234") is ticket


def test_short_registration_ticket_id(lot):
    assert lot.entry_vehicle(bike("X9")).ticket_id == "TX9001"


def test_nearest_free_slot_is_reused(lot):
    tickets = [lot.entry_vehicle(car(f"CAR{i}")) for i in range(5)]
    lot.exit_vehicle(tickets[2].ticket_id)
    assert lot.get_slot("C-03").occupied is False

    again = lot.entry_vehicle(car("NEW1"))
    assert again.slot_id == "C-03"


def test_lowest_of_several_free_slots_wins(lot):
    tickets = [lot.entry_vehicle(car(f"CAR{i}")) for i in range(5)]
    lot.exit_vehicle(tickets[3].ticket_id)
    lot.exit_vehicle(tickets[1].ticket_id)

    assert lot.entry_vehicle(car("NEW1")).slot_id == "C-02"
    assert lot.entry_vehicle(car("NEW2")).slot_id == "C-04"


def test_already_parked_leaves_state_untouched(lot):
    first = lot.entry_vehicle(car("KA01"))
    before = lot.occupancy()

    result = lot.entry_vehicle(bike("KA01"))

    assert result == AlreadyParked(first.ticket_id)
    assert lot.occupancy() == before
    assert lot.active_tickets() == [first]


def test_exit_is_idempotent(lot):
    ticket = lot.entry_vehicle(car("KA01"))
    lot.entry_vehicle(car("KA02"))

    assert lot.exit_vehicle(ticket.ticket_id) is ticket
    after_first = lot.occupancy()
    assert lot.exit_vehicle(ticket.ticket_id) is None
    assert lot.occupancy() == after_first
    assert after_first.car_occupied == 1
    assert lot.find_active_ticket_by_reg("KA01") == NotFound("KA01")


def test_exit_unknown_ticket_is_noop(lot):
    assert lot.exit_vehicle("TNOPE001") is None


def test_ticket_ids_unique_across_reentry(lot):
    # count-based ids would hand out TAAAA002 twice here
    a = lot.entry_vehicle(car("AAAA1"))
    b = lot.entry_vehicle(car("AAAA2"))
    lot.exit_vehicle(a.ticket_id)
    c = lot.entry_vehicle(car("AAAA3"))

    ids = {a.ticket_id, b.ticket_id, c.ticket_id}
    assert len(ids) == 3


def test_interleaved_entries_and_exits_keep_indexes_consistent(lot):
    issued = set()
    for round_ in range(4):
        tickets = [lot.entry_vehicle(car(f"R{round_}C{i}")) for i in range(3)]
        tickets += [lot.entry_vehicle(bike(f"R{round_}B{i}")) for i in range(2)]
        for t in tickets:
            assert t.ticket_id not in issued
            issued.add(t.ticket_id)
        for t in tickets[::2]:
            lot.exit_vehicle(t.ticket_id)

        active = lot.active_tickets()
        assert len({t.ticket_id for t in active}) == len(active)
        assert len({t.vehicle.registration_number for t in active}) == len(active)
        occupied = {s.slot_id for pool in lot.slots.values() for s in pool if s.occupied}
        assert occupied == {t.slot_id for t in active}
        for t in active:
            assert lot.find_active_ticket_by_reg(t.vehicle.registration_number) is t
        lot.reset(5, 3)


def test_active_tickets_in_issuance_order(lot):
    regs = ["ZZ1", "AA1", "MM1"]
    for reg in regs:
        lot.entry_vehicle(car(reg))
    assert [t.vehicle.registration_number for t in lot.active_tickets()] == regs


def test_reset_discards_everything(lot):
    first = lot.entry_vehicle(car("KA01"))
    lot.entry_vehicle(bike("KA02"))

    lot.reset(2, 1)

    assert lot.active_tickets() == []
    assert lot.occupancy().car_total == 2
    assert lot.occupancy().bike_total == 1
    assert lot.occupancy().car_occupied == 0
    assert lot.find_active_ticket_by_reg("KA01") == NotFound("KA01")
    assert lot.exit_vehicle(first.ticket_id) is None

    again = lot.entry_vehicle(car("KA01"))
    assert again.slot_id == "C-01"
    assert again.ticket_id != first.ticket_id


def test_failed_reset_keeps_current_lot(lot):
    ticket = lot.entry_vehicle(car("KA01"))
    with pytest.raises(ValueError):
        lot.reset(3, -2)
    assert lot.active_tickets() == [ticket]
