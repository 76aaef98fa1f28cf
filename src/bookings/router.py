from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from src.database import get_db
from src.auth.dependencies import require_commuter
from src.auth.schemas import Principal
from src.bookings.schemas import (
    ReservationRequest, Reservation, ReservationCreated, ScheduleSearchResult
)
from src.bookings.reservation_service import ReservationService
from src.bookings.search_service import ScheduleSearchService
from src.seats.layout import SeatLayoutProjector
from src.seats.schemas import SeatLayout

router = APIRouter()

@router.get("/searchbus", response_model=ScheduleSearchResult)
def search_buses(
    departure_point: Optional[str] = Query(None, alias="departurePoint", description="Departure point of a leg"),
    arrival_point: Optional[str] = Query(None, alias="arrivalPoint", description="Arrival point of a leg"),
    date: Optional[str] = Query(None, description="Travel date (YYYY-MM-DD)"),
    db: Session = Depends(get_db)
):
    """Search active schedules between two points on a date"""
    criteria = ScheduleSearchService.parse_criteria(departure_point, arrival_point, date)
    schedules = ScheduleSearchService(db).search(criteria)

    if not schedules:
        return ScheduleSearchResult(
            message="No buses found for the specified criteria",
            criteria=criteria,
            schedules=[]
        )

    return ScheduleSearchResult(
        message=f"Found {len(schedules)} schedule(s)",
        criteria=criteria,
        schedules=schedules
    )

@router.get("/seats/{schedule_id}", response_model=SeatLayout)
def get_seats_by_schedule(
    schedule_id: str,
    principal: Principal = Depends(require_commuter),
    db: Session = Depends(get_db)
):
    """Get the seat map of a schedule"""
    return SeatLayoutProjector(db).project_seat_layout(schedule_id)

@router.post("/reserve", response_model=ReservationCreated, status_code=status.HTTP_201_CREATED)
def reserve_seats(
    request: ReservationRequest,
    schedule_id: str = Query(..., alias="scheduleId", description="Schedule token"),
    principal: Principal = Depends(require_commuter),
    db: Session = Depends(get_db)
):
    """Reserve seats on a schedule"""
    reservation = ReservationService(db).reserve_seats(schedule_id, principal, request)
    return ReservationCreated(
        reservation_id=reservation.reservation_id,
        reservation=Reservation.model_validate(reservation)
    )

@router.get("/reservations", response_model=List[Reservation])
def get_reservations_by_username(
    principal: Principal = Depends(require_commuter),
    db: Session = Depends(get_db)
):
    """Get reservations made by the caller"""
    return ReservationService(db).get_user_reservations(principal.name)
