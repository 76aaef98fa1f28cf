"""
Seat Ledger Module

Per-schedule record of seat statuses written by two independent paths:
operator bulk updates and commuter reservations.

Key Components:
- ledger.py: ledger reads and writes plus the merge fold
- layout.py: projection of the ledger onto seats 1..capacity
- router.py: operator endpoints for seat updates and availability
- schemas.py: seat states and request/response models
"""

from .router import router
from .ledger import SeatLedger, fold_seat_entries
from .layout import SeatLayoutProjector, project_layout, count_available
from .schemas import SeatState, LedgerSource, LedgerEntry, MergedSeat, SeatView, SeatLayout

__all__ = [
    "router",
    "SeatLedger",
    "fold_seat_entries",
    "SeatLayoutProjector",
    "project_layout",
    "count_available",
    "SeatState",
    "LedgerSource",
    "LedgerEntry",
    "MergedSeat",
    "SeatView",
    "SeatLayout"
]
