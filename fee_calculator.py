from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from models import VehicleCategory

MINUTES_PER_HOUR = 60

DEFAULT_RATES: Mapping[VehicleCategory, Decimal] = {
    VehicleCategory.CAR: Decimal("40.00"),
    VehicleCategory.BIKE: Decimal("15.00"),
}
DEFAULT_MINIMUM_FEE = Decimal("20.00")


@dataclass(frozen=True)
class FeeSchedule:
    rates: Mapping[VehicleCategory, Decimal] = field(default_factory=lambda: dict(DEFAULT_RATES))
    minimum_fee: Decimal = DEFAULT_MINIMUM_FEE

    def rate_for(self, category: VehicleCategory) -> Decimal:
        try:
            return self.rates[category]
        except KeyError:
            raise ValueError(f"No hourly rate configured for {category.value}") from None


class FeeCalculator:
    """
    Hourly billing with a floor.

    Every started hour is billed in full; the result never drops
    below the schedule's minimum fee.
    """

    def __init__(self, schedule: FeeSchedule | None = None) -> None:
        self.schedule = schedule or FeeSchedule()

    def calculate_fee(self, category: VehicleCategory, minutes_parked: int) -> Decimal:
        minimum = self.schedule.minimum_fee
        if minutes_parked <= 0:
            return minimum

        hours = -(-minutes_parked // MINUTES_PER_HOUR)
        amount = hours * self.schedule.rate_for(category)
        return max(amount, minimum)
