from pydantic import Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

from src.schemas import CamelModel

class SeatState(str, Enum):
    """Status a seat can have in the ledger"""
    AVAILABLE = "Available"
    NOT_AVAILABLE = "NotAvailable"
    RESERVED = "Reserved"
    NOT_PROVIDED = "NotProvided"

class OperatorSeatState(str, Enum):
    """Statuses an operator may set; Reserved only comes from reservations"""
    AVAILABLE = "Available"
    NOT_AVAILABLE = "NotAvailable"
    NOT_PROVIDED = "NotProvided"

class LedgerSource(str, Enum):
    OPERATOR = "operator"
    RESERVATION = "reservation"

class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"

class SeatUpdateItem(CamelModel):
    seat_number: int = Field(..., gt=0)
    status: OperatorSeatState
    gender: Optional[Gender] = None

class SeatUpdateRequest(CamelModel):
    """Operator bulk seat status update"""
    seat_updates: List[SeatUpdateItem] = Field(..., min_length=1)

class LedgerEntry(CamelModel):
    """One write to the seat ledger, tagged with the path that made it"""
    seat_number: int
    status: SeatState
    source: LedgerSource
    gender: Optional[Gender] = None

    class Config:
        frozen = True

class MergedSeat(CamelModel):
    status: SeatState
    gender: Optional[Gender] = None

    class Config:
        frozen = True

class SeatView(CamelModel):
    """One seat of the projected seat map"""
    seat_number: int
    status: SeatState = SeatState.AVAILABLE
    gender: Optional[Gender] = None

class SeatLayout(CamelModel):
    schedule_id: str
    capacity: int
    seats: List[SeatView]

class SeatLedgerView(CamelModel):
    """Raw ledger plus the seat map derived from it"""
    schedule_id: str
    operator_name: Optional[str] = None
    updated_at: Optional[datetime] = None
    seat_updates: List[LedgerEntry] = []
    seats: List[SeatView]
