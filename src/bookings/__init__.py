"""
Booking Module

Commuter-facing side of the system: schedule search, seat maps and the
reservation engine that commits seat holds against a schedule's seat ledger.

Key Components:
- reservation_service.py: all-or-nothing seat reservation and reservationId derivation
- search_service.py: schedule search annotated with live seat availability
- router.py: commuter endpoints
- schemas.py: Pydantic models for reservations and search results

Features:
- Conflict check reports every unavailable seat, never a partial reservation
- Reservation record and ledger holds commit in one transaction
- Storage-level uniqueness on reservationId and on reserved seats per schedule
"""

from .router import router
from .reservation_service import ReservationService, generate_reservation_id
from .search_service import ScheduleSearchService
from .schemas import (
    ReservationRequest, Reservation, ReservationCreated, ReservedSeat,
    SearchCriteria, AvailableSchedule, ScheduleSearchResult
)

__all__ = [
    "router",
    "ReservationService",
    "generate_reservation_id",
    "ScheduleSearchService",
    "ReservationRequest",
    "Reservation",
    "ReservationCreated",
    "ReservedSeat",
    "SearchCriteria",
    "AvailableSchedule",
    "ScheduleSearchResult"
]
