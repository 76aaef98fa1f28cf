from typing import Dict, List
from sqlalchemy.orm import Session

from src.models import Schedule
from src.seats.ledger import SeatLedger
from src.seats.schemas import MergedSeat, SeatLayout, SeatState, SeatView
from src.exceptions import NotFoundError

def project_layout(capacity: int, merged: Dict[int, MergedSeat]) -> List[SeatView]:
    """Expand the sparse merged ledger into seats 1..capacity, defaulting to Available"""
    seats = []
    for seat_number in range(1, capacity + 1):
        merged_seat = merged.get(seat_number)
        if merged_seat:
            seats.append(SeatView(seat_number=seat_number, status=merged_seat.status, gender=merged_seat.gender))
        else:
            seats.append(SeatView(seat_number=seat_number, status=SeatState.AVAILABLE, gender=None))
    return seats

def count_available(capacity: int, merged: Dict[int, MergedSeat]) -> int:
    """Capacity minus every in-range seat whose merged status is not Available"""
    taken = sum(
        1 for seat_number, merged_seat in merged.items()
        if 1 <= seat_number <= capacity and merged_seat.status != SeatState.AVAILABLE
    )
    return capacity - taken

class SeatLayoutProjector:
    """Builds the canonical seat map of a schedule"""

    def __init__(self, db: Session):
        self.db = db
        self.ledger = SeatLedger(db)

    def project_seat_layout(self, schedule_id: str) -> SeatLayout:
        schedule = self.db.query(Schedule).filter(Schedule.schedule_token == schedule_id).first()
        if not schedule:
            raise NotFoundError("Schedule not found")

        merged = self.ledger.merged_status(schedule_id)
        return SeatLayout(
            schedule_id=schedule_id,
            capacity=schedule.bus_capacity,
            seats=project_layout(schedule.bus_capacity, merged)
        )
