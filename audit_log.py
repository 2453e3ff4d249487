from __future__ import annotations

import itertools
import logging
from typing import Optional

from config import Config
from models import ExitReceipt, Ticket

_trail_ids = itertools.count(1)


class AuditLog:
    """
    Append-only text trail of entries and exits.

    Each instance gets its own non-propagating logger with a single
    FileHandler, so two trails never see each other's lines. The file is
    opened on the first write.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or Config.LOG_FILE
        self._handler = logging.FileHandler(self.path, mode="a", encoding="utf-8", delay=True)
        self._handler.setFormatter(
            logging.Formatter("%(asctime)s | %(message)s", datefmt=Config.TIMESTAMP_FORMAT)
        )
        self._logger = logging.getLogger(f"parking.audit.{next(_trail_ids)}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._logger.addHandler(self._handler)

    def record_entry(self, ticket: Ticket) -> None:
        self._logger.info(
            "ENTRY | Ticket:%s | Reg:%s | Type:%s | Slot:%s | Time:%s",
            ticket.ticket_id,
            ticket.vehicle.registration_number,
            ticket.vehicle.category.value,
            ticket.slot_id,
            _fmt(ticket.entry_time),
        )

    def record_exit(self, receipt: ExitReceipt) -> None:
        t = receipt.ticket
        self._logger.info(
            "EXIT  | Ticket:%s | Reg:%s | Type:%s | Slot:%s | Entry:%s | Exit:%s | Minutes:%d | Amount:%.2f",
            t.ticket_id,
            t.vehicle.registration_number,
            t.vehicle.category.value,
            t.slot_id,
            _fmt(t.entry_time),
            _fmt(receipt.exit_time),
            receipt.minutes_parked,
            receipt.amount,
        )

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()


def _fmt(ts) -> str:
    return ts.strftime(Config.TIMESTAMP_FORMAT)
