from typing import List
from sqlalchemy.orm import Session
from pydantic import BaseModel

from src.models import Route, Bus
from src.schedules.schemas import RouteSnapshot, BusSnapshot
from src.exceptions import NotFoundError, ValidationError

class ScheduleValidationIssue(BaseModel):
    """A single reason a schedule cannot be published"""
    error_code: str
    error_message: str
    field: str

NOT_FOUND_CODES = {"ROUTE_NOT_FOUND", "BUS_NOT_FOUND"}

class ScheduleValidator:
    """Checks the catalog entries a schedule refers to before it is persisted"""

    def __init__(self, db: Session):
        self.db = db

    def validate_references(self, route: RouteSnapshot, bus: BusSnapshot) -> List[ScheduleValidationIssue]:
        """Collect every problem with the referenced route and bus"""
        issues = []

        db_route = self.db.query(Route).filter(
            Route.route_number == route.route_number
        ).first()
        if not db_route:
            issues.append(ScheduleValidationIssue(
                error_code="ROUTE_NOT_FOUND",
                error_message=f"Route {route.route_number} does not exist",
                field="route.routeNumber"
            ))
        elif not db_route.is_active:
            issues.append(ScheduleValidationIssue(
                error_code="ROUTE_INACTIVE",
                error_message="Selected route is not available or inactive. Please check!!",
                field="route.routeNumber"
            ))

        db_bus = self.db.query(Bus).filter(
            Bus.registration_number == bus.registration_number
        ).first()
        if not db_bus:
            issues.append(ScheduleValidationIssue(
                error_code="BUS_NOT_FOUND",
                error_message=f"Bus {bus.registration_number} does not exist",
                field="bus.registrationNumber"
            ))
        elif not db_bus.is_available:
            issues.append(ScheduleValidationIssue(
                error_code="BUS_INACTIVE",
                error_message="Selected bus is not available or inactive. Please check!!",
                field="bus.registrationNumber"
            ))
        elif db_bus.operator_name != bus.operator_name:
            issues.append(ScheduleValidationIssue(
                error_code="BUS_OPERATOR_MISMATCH",
                error_message=f"Bus {bus.registration_number} is not operated by {bus.operator_name}",
                field="bus.operatorName"
            ))

        return issues

    def ensure_references(self, route: RouteSnapshot, bus: BusSnapshot) -> None:
        """Raise if the schedule may not be created"""
        issues = self.validate_references(route, bus)
        if not issues:
            return

        message = "; ".join(issue.error_message for issue in issues)
        if any(issue.error_code in NOT_FOUND_CODES for issue in issues):
            raise NotFoundError(message)
        raise ValidationError(message)
