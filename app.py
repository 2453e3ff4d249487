import logging
from typing import Optional

from flask import Flask, jsonify, request

from audit_log import AuditLog
from config import Config
from fee_calculator import FeeCalculator
from models import AlreadyParked, LotFull, NotFound
from parking_lot import ParkingLot
from parking_system import ParkingSystem

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_system() -> ParkingSystem:
    return ParkingSystem(
        lot=ParkingLot(Config.CAR_SLOTS, Config.BIKE_SLOTS),
        calculator=FeeCalculator(Config.fee_schedule()),
        audit=AuditLog(Config.LOG_FILE),
    )


def create_app(system: Optional[ParkingSystem] = None) -> Flask:
    app = Flask(__name__)
    system = system or build_system()
    app.config["PARKING_SYSTEM"] = system

    def error(message: str, status: int, **extra):
        body = {"error": message}
        body.update(extra)
        return jsonify(body), status

    def json_object() -> dict:
        payload = request.get_json(silent=True)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object.")
        return payload

    @app.errorhandler(ValueError)
    def handle_value_error(exc: ValueError):
        return error(str(exc), 400)

    # -------------------------
    # Routes
    # -------------------------
    @app.route("/", methods=["GET"])
    def root():
        return jsonify({"message": "Small Mall Parking System"})

    @app.route("/entry", methods=["POST"])
    def entry():
        payload = json_object()
        result = system.enter(payload.get("registration", ""), payload.get("category", ""))

        if isinstance(result, AlreadyParked):
            return error(
                f"Vehicle already inside with ticket: {result.existing_ticket_id}",
                409,
                ticket_id=result.existing_ticket_id,
            )
        if isinstance(result, LotFull):
            return error(f"Parking full for {result.category.value}.", 409)
        return jsonify(result.to_dict()), 201

    @app.route("/exit", methods=["POST"])
    def exit_():
        payload = json_object()
        result = system.check_out(payload.get("registration", ""))
        if isinstance(result, NotFound):
            return error("No active ticket found for this registration.", 404)
        return jsonify(result.to_dict())

    @app.route("/occupancy", methods=["GET"])
    def occupancy():
        return jsonify(system.get_occupancy().to_dict())

    @app.route("/tickets", methods=["GET"])
    def tickets():
        return jsonify([t.to_dict() for t in system.list_active_tickets()])

    @app.route("/configure", methods=["POST"])
    def configure():
        payload = json_object()
        try:
            car_slots = int(payload["car_slots"])
            bike_slots = int(payload["bike_slots"])
        except (KeyError, TypeError, ValueError):
            return error("car_slots and bike_slots must be integers.", 400)

        system.reset(car_slots, bike_slots)
        return jsonify({"message": "Parking lot reset.", **system.get_occupancy().to_dict()})

    return app


app = create_app()

if __name__ == "__main__":
    logger.info("Starting parking system with %d car / %d bike slots", Config.CAR_SLOTS, Config.BIKE_SLOTS)
    app.run(debug=True)
