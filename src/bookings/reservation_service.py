from typing import Callable, List, Optional
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.models import Schedule, Reservation
from src.auth.schemas import Principal
from src.bookings.schemas import ReservationRequest
from src.seats.ledger import SeatLedger
from src.seats.schemas import SeatState
from src.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from src.logger import logger

def generate_reservation_id(
    on_date: date,
    route_number: str,
    registration_number: str,
    seat_numbers: List[int]
) -> str:
    """YYMMDD-<route>-<last 4 of registration>-<seat>-<seat>..."""
    seats = "-".join(str(seat_number) for seat_number in seat_numbers)
    return f"{on_date:%y%m%d}-{route_number}-{registration_number[-4:]}-{seats}"

class ReservationService:
    """Atomic seat reservation against a schedule's seat ledger"""

    def __init__(self, db: Session, clock: Callable[[], date] = date.today):
        self.db = db
        self.ledger = SeatLedger(db)
        self.clock = clock

    def reserve_seats(
        self,
        schedule_id: str,
        principal: Principal,
        request: ReservationRequest
    ) -> Reservation:
        """Reserve every requested seat or none of them"""
        schedule = self.db.query(Schedule).filter(Schedule.schedule_token == schedule_id).first()
        if not schedule:
            raise NotFoundError("Schedule not found")

        seat_numbers = sorted(request.seats)
        out_of_range = [n for n in seat_numbers if n > schedule.bus_capacity]
        if out_of_range:
            raise ValidationError(
                f"Seat numbers must be between 1 and {schedule.bus_capacity}: {out_of_range}"
            )

        # Lock the ledger row (where supported) for the rest of the transaction
        reserved = self.ledger.reserved_seats(schedule_id, for_update=True)
        unavailable = [n for n in seat_numbers if n in reserved]
        if unavailable:
            self.db.rollback()
            logger.warning(f"Reservation on {schedule_id} rejected, seats already reserved: {unavailable}")
            raise ConflictError("Some seats are already reserved", unavailable_seats=unavailable)

        reservation_id = generate_reservation_id(
            self.clock(),
            schedule.route_number,
            schedule.bus_registration_number,
            seat_numbers
        )
        reservation = Reservation(
            reservation_id=reservation_id,
            username=principal.name,
            passenger_name=request.passenger_name,
            gender=request.gender.value,
            mobile_number=request.mobile_number,
            email=request.email,
            boarding_place=request.boarding_place,
            destination_place=request.destination_place,
            seats=[
                {"seatNumber": n, "status": SeatState.RESERVED.value} for n in seat_numbers
            ],
            schedule_id=schedule_id,
            ticket_amount=Decimal(schedule.bus_ticket_price) * len(seat_numbers)
        )

        # The reservation row and the ledger holds commit together or not at all
        try:
            self.db.add(reservation)
            self.db.flush()
            self.ledger.append_reservation_holds(
                schedule_id,
                schedule.bus_operator_name,
                seat_numbers,
                gender=request.gender
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise self._conflict_from_integrity_error(schedule_id, reservation_id, seat_numbers) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.opt(exception=e).error(f"Reservation {reservation_id} failed, nothing was committed")
            raise InternalError("Failed to reserve seats") from e

        self.db.refresh(reservation)
        logger.info(
            f"User '{principal.name}' reserved seats {seat_numbers} on {schedule_id} as {reservation_id}"
        )
        return reservation

    def get_user_reservations(self, username: str) -> List[Reservation]:
        """Get reservations made by a user, newest first"""
        return self.db.query(Reservation).filter(
            Reservation.username == username
        ).order_by(Reservation.created_at.desc(), Reservation.id.desc()).all()

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(
            Reservation.reservation_id == reservation_id
        ).first()

    def _conflict_from_integrity_error(
        self,
        schedule_id: str,
        reservation_id: str,
        seat_numbers: List[int]
    ) -> ConflictError:
        # Lost a race for the seats, or the same reservation id already exists
        reserved = self.ledger.reserved_seats(schedule_id)
        unavailable = [n for n in seat_numbers if n in reserved]
        if unavailable:
            logger.warning(f"Concurrent reservation on {schedule_id} took seats {unavailable}")
            return ConflictError("Some seats are already reserved", unavailable_seats=unavailable)

        if self.get_reservation(reservation_id):
            logger.warning(f"Reservation id {reservation_id} already exists")
            return ConflictError(f"Reservation {reservation_id} already exists")

        return ConflictError("Seat ledger was modified concurrently, please retry")
