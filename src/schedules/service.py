from typing import List, Optional
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from src.models import Schedule
from src.auth.schemas import Principal
from src.schedules.schemas import ScheduleCreate, ScheduleUpdate
from src.schedules.identity import resolve_schedule_token
from src.schedules.validation import ScheduleValidator
from src.exceptions import (
    AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from src.logger import logger

class ScheduleService:
    """Publishing and maintenance of operator schedules"""

    def __init__(self, db: Session):
        self.db = db
        self.validator = ScheduleValidator(db)

    def get_schedule_by_token(self, schedule_token: str) -> Optional[Schedule]:
        return self.db.query(Schedule).filter(Schedule.schedule_token == schedule_token).first()

    def get_schedule_or_404(self, schedule_token: str) -> Schedule:
        schedule = self.get_schedule_by_token(schedule_token)
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def create_schedule(self, principal: Principal, request: ScheduleCreate) -> Schedule:
        """Validate the referenced route and bus, derive the token and persist"""
        operator_name = self._require_operator_name(principal)
        if request.bus.operator_name != operator_name:
            raise AuthorizationError("You can only publish schedules for your own buses")

        self.validator.ensure_references(request.route, request.bus)

        schedule_token = resolve_schedule_token(
            request.schedule_token,
            request.route.route_number,
            request.bus.registration_number,
            request.schedule[0].departure_time,
            request.route.route_name
        )
        if self.get_schedule_by_token(schedule_token):
            raise ConflictError(f"Schedule token {schedule_token} already exists")

        db_schedule = Schedule(
            schedule_token=schedule_token,
            route_number=request.route.route_number,
            route_name=request.route.route_name,
            bus_registration_number=request.bus.registration_number,
            bus_operator_name=request.bus.operator_name,
            bus_type=request.bus.bus_type,
            bus_ticket_price=Decimal(str(request.bus.ticket_price)),
            bus_capacity=request.bus.capacity,
            bus_available_seats=request.bus.available_seats,
            legs=self._dump_legs(request.schedule),
            start_date=request.schedule_valid.start_date,
            end_date=request.schedule_valid.end_date,
            is_active=request.is_active
        )

        try:
            self.db.add(db_schedule)
            self.db.commit()
            self.db.refresh(db_schedule)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Schedule token {schedule_token} already exists")

        logger.info(f"Operator '{operator_name}' published schedule {schedule_token}")
        return db_schedule

    def update_schedule(self, schedule_token: str, principal: Principal, update: ScheduleUpdate) -> Schedule:
        """Replace the leg list; every other field stays as published"""
        schedule = self.get_owned_schedule(schedule_token, principal)

        if update.schedule is None:
            raise ValidationError("Only the schedule section can be updated")
        if len(update.schedule) == 0:
            raise ValidationError("Invalid schedule data provided")

        schedule.legs = self._dump_legs(update.schedule)
        self.db.commit()
        self.db.refresh(schedule)

        logger.info(f"Operator '{principal.name}' updated legs of schedule {schedule_token}")
        return schedule

    def delete_schedule(self, schedule_token: str, principal: Principal) -> None:
        schedule = self.get_owned_schedule(schedule_token, principal)
        self.db.delete(schedule)
        self.db.commit()
        logger.info(f"Operator '{principal.name}' deleted schedule {schedule_token}")

    def get_operator_schedules(self, principal: Principal) -> List[Schedule]:
        """Get all schedules run by the calling operator"""
        operator_name = self._require_operator_name(principal)
        return self.db.query(Schedule).filter(
            Schedule.bus_operator_name == operator_name
        ).order_by(Schedule.start_date, Schedule.id).all()

    def get_owned_schedule(self, schedule_token: str, principal: Principal) -> Schedule:
        """Look up a schedule the calling operator is allowed to modify"""
        operator_name = self._require_operator_name(principal)
        schedule = self.get_schedule_or_404(schedule_token)
        if schedule.bus_operator_name != operator_name:
            raise AuthorizationError("You do not have permission to modify this schedule")
        return schedule

    @staticmethod
    def _require_operator_name(principal: Principal) -> str:
        if not principal.name:
            raise AuthenticationError("Operator information is missing or unauthorized")
        return principal.name

    @staticmethod
    def _dump_legs(legs) -> list:
        return [leg.model_dump(mode="json", by_alias=True) for leg in legs]
