from pydantic import Field, validator
from typing import List, Optional
from datetime import datetime, date

from src.schemas import CamelModel

class ScheduleLeg(CamelModel):
    """One departure/arrival segment of a schedule"""
    departure_point: str = Field(..., min_length=1)
    departure_time: datetime
    arrival_point: str = Field(..., min_length=1)
    arrival_time: datetime
    stops: List[str] = []

    @validator('departure_point', 'arrival_point')
    def strip_points(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Point names cannot be blank')
        return v

    @validator('arrival_time')
    def validate_arrival_time(cls, v, values):
        departure = values.get('departure_time')
        if departure and v < departure:
            raise ValueError('Arrival time cannot be before departure time')
        return v

class RouteSnapshot(CamelModel):
    """Route details copied into the schedule"""
    route_number: str = Field(..., min_length=1)
    route_name: str = Field(..., min_length=1)

class BusSnapshot(CamelModel):
    """Bus details copied into the schedule"""
    registration_number: str = Field(..., min_length=1)
    operator_name: str = Field(..., min_length=1)
    bus_type: str = Field(..., min_length=1)
    ticket_price: float = Field(..., ge=0)
    capacity: int = Field(..., gt=0, le=100)
    available_seats: Optional[int] = Field(None, ge=0)

    @validator('available_seats', always=True)
    def default_available_seats(cls, v, values):
        capacity = values.get('capacity')
        if v is None:
            return capacity
        if capacity is not None and v > capacity:
            raise ValueError('Available seats cannot exceed capacity')
        return v

class ScheduleValidity(CamelModel):
    """Date window in which the schedule runs"""
    start_date: date
    end_date: date

    @validator('end_date')
    def validate_end_date(cls, v, values):
        start = values.get('start_date')
        if start and v < start:
            raise ValueError('End date must not be before start date')
        return v

class ScheduleCreate(CamelModel):
    """Operator request to publish a schedule"""
    route: RouteSnapshot
    bus: BusSnapshot
    schedule: List[ScheduleLeg] = Field(..., min_length=1)
    schedule_valid: ScheduleValidity
    is_active: bool = True
    schedule_token: Optional[str] = None

class ScheduleUpdate(CamelModel):
    """Only the leg list of a schedule can change"""
    schedule: Optional[List[ScheduleLeg]] = None

    class Config:
        extra = "forbid"

class Schedule(CamelModel):
    id: int
    schedule_token: str
    route: RouteSnapshot
    bus: BusSnapshot
    schedule: List[ScheduleLeg]
    schedule_valid: ScheduleValidity
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, db_schedule) -> "Schedule":
        """Rebuild the nested view from the flat schedules row"""
        return cls(
            id=db_schedule.id,
            schedule_token=db_schedule.schedule_token,
            route=RouteSnapshot(
                route_number=db_schedule.route_number,
                route_name=db_schedule.route_name
            ),
            bus=BusSnapshot(
                registration_number=db_schedule.bus_registration_number,
                operator_name=db_schedule.bus_operator_name,
                bus_type=db_schedule.bus_type,
                ticket_price=float(db_schedule.bus_ticket_price),
                capacity=db_schedule.bus_capacity,
                available_seats=db_schedule.bus_available_seats
            ),
            schedule=[ScheduleLeg.model_validate(leg) for leg in db_schedule.legs or []],
            schedule_valid=ScheduleValidity(
                start_date=db_schedule.start_date,
                end_date=db_schedule.end_date
            ),
            is_active=db_schedule.is_active,
            created_at=db_schedule.created_at,
            updated_at=db_schedule.updated_at
        )

class ScheduleResponse(CamelModel):
    message: str
    schedule: Schedule

class ScheduleListResponse(CamelModel):
    message: str = "Schedules retrieved"
    schedules: List[Schedule]
