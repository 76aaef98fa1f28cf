#!/usr/bin/env python3
"""
Seed Data Script

Creates demo users, routes, buses and one schedule for the Bus Seat Reservation System.

Usage:
    python seed_data.py
"""

import sys
import os
from datetime import date, datetime, timedelta
from decimal import Decimal

# Add project root to path
sys.path.insert(0, os.path.dirname(__file__))

from src.database import SessionLocal, init_db
from src.models import User, Route, Bus, Schedule, SeatStatus, SeatUpdate, Reservation
from src.auth.utils import get_password_hash
from src.catalog.service import generate_bus_id
from src.schedules.identity import generate_schedule_token
from src.logger import logger

def create_seed_data():
    init_db()
    db = SessionLocal()

    try:
        logger.info("Creating seed data for Bus Seat Reservation System...")

        # Clear existing data (in reverse dependency order)
        logger.info("Clearing existing data...")
        db.query(Reservation).delete()
        db.query(SeatUpdate).delete()
        db.query(SeatStatus).delete()
        db.query(Schedule).delete()
        db.query(Bus).delete()
        db.query(Route).delete()
        db.query(User).delete()

        # 1. Users
        logger.info("Creating users...")
        users = [
            User(name="admin", email="admin@example.com", password=get_password_hash("Admin123!"), role="Admin"),
            User(name="SuperLine", email="operator@example.com", password=get_password_hash("Operator123!"), role="Operator"),
            User(name="nimal", email="commuter@example.com", password=get_password_hash("Commuter123!"), role="Commuter"),
        ]
        db.add_all(users)
        db.flush()

        # 2. Routes
        logger.info("Creating routes...")
        routes = [
            Route(route_number="5", starting_point="Colombo", ending_point="Kurunegala", distance="94 km"),
            Route(route_number="1", starting_point="Colombo", ending_point="Kandy", distance="115 km"),
            Route(route_number="2", starting_point="Colombo", ending_point="Matara", distance="160 km"),
        ]
        db.add_all(routes)
        db.flush()

        # 3. Buses
        logger.info("Creating buses...")
        buses_data = [
            ("B-501", "NB-1234", "Kamal Perera", "Luxury", 45, Decimal("850.00"), "5"),
            ("B-101", "NC-5678", "Sunil Silva", "Semi-Luxury", 50, Decimal("650.00"), "1"),
            ("B-201", "ND-9012", "Ruwan Fernando", "Normal", 54, Decimal("420.00"), "2"),
        ]
        buses = [
            Bus(
                bus_id=generate_bus_id(registration),
                bus_number=bus_number,
                registration_number=registration,
                driver_name=driver,
                operator_name="SuperLine",
                bus_type=bus_type,
                capacity=capacity,
                ticket_price=price,
                route_number=route_number
            )
            for bus_number, registration, driver, bus_type, capacity, price, route_number in buses_data
        ]
        db.add_all(buses)
        db.flush()

        # 4. Schedule for the Colombo - Kurunegala route
        logger.info("Creating schedules...")
        departure = datetime.combine(date.today() + timedelta(days=1), datetime.min.time()).replace(hour=6)
        legs = [
            {
                "departurePoint": "Colombo",
                "departureTime": departure.isoformat(),
                "arrivalPoint": "Kurunegala",
                "arrivalTime": (departure + timedelta(hours=3)).isoformat(),
                "stops": ["Kadawatha", "Nittambuwa", "Warakapola"]
            }
        ]
        schedule = Schedule(
            schedule_token=generate_schedule_token("5", "NB-1234", departure, "Colombo Kurunegala"),
            route_number="5",
            route_name="Colombo Kurunegala",
            bus_registration_number="NB-1234",
            bus_operator_name="SuperLine",
            bus_type="Luxury",
            bus_ticket_price=Decimal("850.00"),
            bus_capacity=45,
            bus_available_seats=45,
            legs=legs,
            start_date=date.today(),
            end_date=date.today() + timedelta(days=90)
        )
        db.add(schedule)

        db.commit()

        logger.info("Seed data created successfully!")
        logger.info(f"  - {len(users)} users")
        logger.info(f"  - {len(routes)} routes")
        logger.info(f"  - {len(buses)} buses")
        logger.info(f"  - 1 schedule ({schedule.schedule_token})")

    except Exception as e:
        logger.error(f"Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
