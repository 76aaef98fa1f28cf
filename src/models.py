from sqlalchemy import Column, Integer, BigInteger, String, Boolean, DateTime, Date, ForeignKey, Numeric, JSON, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from src.database import Base

# ================================
# Users
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="Commuter")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

# ================================
# Catalog: Routes & Buses
# ================================
class Route(Base):
    __tablename__ = "routes"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    route_number = Column(String(50), unique=True, nullable=False, index=True)
    starting_point = Column(String(255), nullable=False)
    ending_point = Column(String(255), nullable=False)
    distance = Column(String(50), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class Bus(Base):
    __tablename__ = "buses"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    bus_id = Column(String(20), unique=True, nullable=False, index=True)
    bus_number = Column(String(50), unique=True, nullable=False)
    registration_number = Column(String(50), unique=True, nullable=False, index=True)
    driver_name = Column(String(255))
    operator_name = Column(String(255), nullable=False, index=True)
    bus_type = Column(String(50), nullable=False)
    capacity = Column(Integer, nullable=False)
    ticket_price = Column(Numeric(10, 2), nullable=False)
    # Human-readable route number, copied by value
    route_number = Column(String(50), nullable=False, index=True)
    is_available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

# ================================
# Schedules
# ================================
class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    schedule_token = Column(String(255), unique=True, nullable=False, index=True)

    # Route snapshot
    route_number = Column(String(50), nullable=False)
    route_name = Column(String(255), nullable=False)

    # Bus snapshot
    bus_registration_number = Column(String(50), nullable=False)
    bus_operator_name = Column(String(255), nullable=False, index=True)
    bus_type = Column(String(50), nullable=False)
    bus_ticket_price = Column(Numeric(10, 2), nullable=False)
    bus_capacity = Column(Integer, nullable=False)
    bus_available_seats = Column(Integer, nullable=False)

    # Ordered legs: departurePoint, departureTime, arrivalPoint, arrivalTime, stops
    legs = Column(JSON, nullable=False, default=list)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

# ================================
# Seat Ledger
# ================================
class SeatStatus(Base):
    __tablename__ = "seat_statuses"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    schedule_id = Column(String(255), unique=True, nullable=False, index=True)
    operator_name = Column(String(255), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    seat_updates = relationship(
        "SeatUpdate",
        back_populates="seat_status",
        order_by="SeatUpdate.id",
        cascade="all, delete-orphan"
    )

class SeatUpdate(Base):
    __tablename__ = "seat_updates"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    seat_status_id = Column(BigInteger().with_variant(Integer, "sqlite"), ForeignKey("seat_statuses.id"), nullable=False)
    seat_number = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False)
    gender = Column(String(10))
    # "operator" or "reservation"
    source = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    seat_status = relationship("SeatStatus", back_populates="seat_updates")

    __table_args__ = (
        # One operator entry per seat, overwritten in place
        Index(
            "uq_seat_updates_operator_seat", "seat_status_id", "seat_number",
            unique=True,
            postgresql_where=text("source = 'operator'"),
            sqlite_where=text("source = 'operator'")
        ),
        # A seat can be held by at most one reservation
        Index(
            "uq_seat_updates_reserved_seat", "seat_status_id", "seat_number",
            unique=True,
            postgresql_where=text("source = 'reservation'"),
            sqlite_where=text("source = 'reservation'")
        ),
    )

# ================================
# Reservations
# ================================
class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    reservation_id = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(255), nullable=False, index=True)
    passenger_name = Column(String(255), nullable=False)
    gender = Column(String(10), nullable=False)
    mobile_number = Column(String(30), nullable=False)
    email = Column(String(255))
    boarding_place = Column(String(255), nullable=False)
    destination_place = Column(String(255), nullable=False)
    # [{"seatNumber": 1, "status": "Reserved"}, ...]
    seats = Column(JSON, nullable=False, default=list)
    schedule_id = Column(String(255), nullable=False, index=True)
    ticket_amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
