from pydantic import Field, EmailStr, validator
from typing import List, Optional
from datetime import datetime, date

from src.schemas import CamelModel
from src.schedules.schemas import Schedule
from src.seats.schemas import Gender, SeatState

class ReservationRequest(CamelModel):
    """Commuter request to reserve seats on a schedule"""
    passenger_name: str = Field(..., min_length=1)
    gender: Gender
    mobile_number: str = Field(..., min_length=7, max_length=20)
    email: Optional[EmailStr] = None
    boarding_place: str = Field(..., min_length=1)
    destination_place: str = Field(..., min_length=1)
    seats: List[int] = Field(..., min_length=1)

    @validator('seats')
    def validate_seats(cls, v):
        if any(seat <= 0 for seat in v):
            raise ValueError('Seat numbers must be positive')
        if len(set(v)) != len(v):
            raise ValueError('Seat numbers must not repeat')
        return v

class ReservedSeat(CamelModel):
    seat_number: int
    status: SeatState = SeatState.RESERVED

class Reservation(CamelModel):
    reservation_id: str
    username: str
    passenger_name: str
    gender: Gender
    mobile_number: str
    email: Optional[str] = None
    boarding_place: str
    destination_place: str
    seats: List[ReservedSeat]
    schedule_id: str
    ticket_amount: float
    created_at: Optional[datetime] = None

class ReservationCreated(CamelModel):
    message: str = "Seats reserved successfully"
    reservation_id: str
    reservation: Reservation

class SearchCriteria(CamelModel):
    departure_point: str
    arrival_point: str
    travel_date: date = Field(..., alias="date")

class AvailableSchedule(Schedule):
    """Schedule annotated with live seat availability"""
    available_seats: int
    availability_status: str

class ScheduleSearchResult(CamelModel):
    message: str
    criteria: SearchCriteria
    schedules: List[AvailableSchedule]
