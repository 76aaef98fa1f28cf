from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session

from src.models import Schedule
from src.bookings.schemas import AvailableSchedule, SearchCriteria
from src.schedules.schemas import Schedule as ScheduleView
from src.seats.ledger import SeatLedger
from src.seats.layout import count_available
from src.exceptions import ValidationError

AVAILABLE_LABEL = "Available"
SOLD_OUT_LABEL = "Sold Out"

class ScheduleSearchService:
    """Finds active schedules between two points on a date"""

    def __init__(self, db: Session):
        self.db = db
        self.ledger = SeatLedger(db)

    @staticmethod
    def parse_criteria(
        departure_point: Optional[str],
        arrival_point: Optional[str],
        travel_date: Optional[str]
    ) -> SearchCriteria:
        """Validate raw query parameters without touching storage"""
        departure_point = (departure_point or "").strip()
        arrival_point = (arrival_point or "").strip()
        travel_date = (travel_date or "").strip()

        if not departure_point or not arrival_point or not travel_date:
            raise ValidationError(
                "Missing required query parameters: departurePoint, arrivalPoint, or date"
            )

        try:
            parsed_date = date.fromisoformat(travel_date)
        except ValueError:
            raise ValidationError("Invalid date, expected YYYY-MM-DD")

        return SearchCriteria(
            departure_point=departure_point,
            arrival_point=arrival_point,
            travel_date=parsed_date
        )

    def search(self, criteria: SearchCriteria) -> List[AvailableSchedule]:
        candidates = self.db.query(Schedule).filter(
            Schedule.is_active == True,
            Schedule.start_date <= criteria.travel_date,
            Schedule.end_date >= criteria.travel_date
        ).order_by(Schedule.id).all()

        results = []
        for schedule in candidates:
            if not self._has_matching_leg(schedule, criteria):
                continue

            merged = self.ledger.merged_status(schedule.schedule_token)
            available_seats = count_available(schedule.bus_capacity, merged)
            results.append(AvailableSchedule(
                **ScheduleView.from_model(schedule).model_dump(),
                available_seats=available_seats,
                availability_status=AVAILABLE_LABEL if available_seats > 0 else SOLD_OUT_LABEL
            ))

        return results

    @staticmethod
    def _has_matching_leg(schedule: Schedule, criteria: SearchCriteria) -> bool:
        for leg in schedule.legs or []:
            if (
                (leg.get("departurePoint") or "").strip() == criteria.departure_point
                and (leg.get("arrivalPoint") or "").strip() == criteria.arrival_point
            ):
                return True
        return False
