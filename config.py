import os
from decimal import Decimal

from dotenv import load_dotenv

from fee_calculator import FeeSchedule
from models import VehicleCategory

load_dotenv()


class Config:
    CAR_SLOTS = int(os.getenv("CAR_SLOTS", "20"))
    BIKE_SLOTS = int(os.getenv("BIKE_SLOTS", "10"))

    CAR_RATE_PER_HOUR = Decimal(os.getenv("CAR_RATE_PER_HOUR", "40.0"))
    BIKE_RATE_PER_HOUR = Decimal(os.getenv("BIKE_RATE_PER_HOUR", "15.0"))
    MINIMUM_FEE = Decimal(os.getenv("MINIMUM_FEE", "20.0"))

    LOG_FILE = os.getenv("LOG_FILE", "parking_logs.txt")
    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

    @staticmethod
    def fee_schedule() -> FeeSchedule:
        return FeeSchedule(
            rates={
                VehicleCategory.CAR: Config.CAR_RATE_PER_HOUR,
                VehicleCategory.BIKE: Config.BIKE_RATE_PER_HOUR,
            },
            minimum_fee=Config.MINIMUM_FEE,
        )
