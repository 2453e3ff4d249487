from datetime import datetime, timedelta

import pytest

from fee_calculator import FeeCalculator
from parking_lot import ParkingLot
from parking_system import ParkingSystem


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: int) -> None:
        self.now += timedelta(minutes=minutes)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 1, 9, 0, 0))


@pytest.fixture
def lot(clock):
    return ParkingLot(5, 3, clock=clock)


@pytest.fixture
def system(lot, clock):
    return ParkingSystem(lot, FeeCalculator(), clock=clock)
