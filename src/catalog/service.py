from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models import Route, Bus
from src.catalog.schemas import RouteCreate, BusCreate
from src.exceptions import ConflictError, ValidationError
from src.logger import logger

def generate_bus_id(registration_number: str, year: Optional[int] = None) -> str:
    """Short bus identifier: two-digit year, a zero, last two characters of the registration"""
    year = year if year is not None else date.today().year
    return f"{str(year)[-2:]}0{registration_number[-2:]}"

class RouteService:
    @staticmethod
    def get_route_by_number(db: Session, route_number: str) -> Optional[Route]:
        """Get route by its route number"""
        return db.query(Route).filter(Route.route_number == route_number).first()

    @staticmethod
    def get_routes(db: Session) -> List[Route]:
        """Get all routes"""
        return db.query(Route).order_by(Route.route_number).all()

    @staticmethod
    def create_route(db: Session, route: RouteCreate) -> Route:
        """Create a new route"""
        if RouteService.get_route_by_number(db, route.route_number):
            raise ConflictError("A route with this route number already exists")

        db_route = Route(
            route_number=route.route_number,
            starting_point=route.starting_point,
            ending_point=route.ending_point,
            distance=route.distance,
            is_active=route.is_active
        )
        try:
            db.add(db_route)
            db.commit()
            db.refresh(db_route)
        except IntegrityError:
            db.rollback()
            raise ConflictError("A route with this route number already exists")

        logger.info(f"Added route {db_route.route_number}: {db_route.starting_point} - {db_route.ending_point}")
        return db_route

class BusService:
    @staticmethod
    def get_bus_by_registration(db: Session, registration_number: str) -> Optional[Bus]:
        """Get bus by registration number"""
        return db.query(Bus).filter(Bus.registration_number == registration_number).first()

    @staticmethod
    def get_buses(db: Session) -> List[Bus]:
        """Get all buses"""
        return db.query(Bus).order_by(Bus.id).all()

    @staticmethod
    def create_bus(db: Session, bus: BusCreate) -> Bus:
        """Create a new bus bound to an existing route"""
        if BusService.get_bus_by_registration(db, bus.registration_number):
            raise ConflictError("A bus with this registration number already exists")

        route = RouteService.get_route_by_number(db, bus.route_number)
        if not route:
            raise ValidationError("Invalid route number")

        bus_id = generate_bus_id(bus.registration_number)
        if db.query(Bus).filter(Bus.bus_id == bus_id).first():
            raise ConflictError(f"Bus ID {bus_id} is already taken")

        db_bus = Bus(
            bus_id=bus_id,
            bus_number=bus.bus_number,
            registration_number=bus.registration_number,
            driver_name=bus.driver_name,
            operator_name=bus.operator_name,
            bus_type=bus.bus_type,
            capacity=bus.capacity,
            ticket_price=Decimal(str(bus.ticket_price)),
            route_number=route.route_number,
            is_available=bus.is_available
        )
        try:
            db.add(db_bus)
            db.commit()
            db.refresh(db_bus)
        except IntegrityError:
            db.rollback()
            raise ConflictError("A bus with this bus number or registration already exists")

        logger.info(f"Added bus {db_bus.registration_number} (busId {db_bus.bus_id}) for {db_bus.operator_name}")
        return db_bus
