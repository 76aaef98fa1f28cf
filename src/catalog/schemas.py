from pydantic import Field
from typing import Optional
from datetime import datetime

from src.schemas import CamelModel

class RouteCreate(CamelModel):
    """Admin request to add a route"""
    route_number: str = Field(..., min_length=1, max_length=50)
    starting_point: str = Field(..., min_length=1)
    ending_point: str = Field(..., min_length=1)
    distance: str = Field(..., min_length=1)
    is_active: bool = True

class Route(RouteCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class BusCreate(CamelModel):
    """Admin request to add a bus"""
    bus_number: str = Field(..., min_length=1, max_length=50)
    registration_number: str = Field(..., min_length=2, max_length=50)
    driver_name: Optional[str] = None
    operator_name: str = Field(..., min_length=1)
    bus_type: str = Field(..., min_length=1)
    capacity: int = Field(..., gt=0, le=100)
    ticket_price: float = Field(..., ge=0)
    route_number: str = Field(..., min_length=1)
    is_available: bool = True

class Bus(BusCreate):
    id: int
    bus_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RouteCreated(CamelModel):
    message: str = "Route added successfully"
    route: Route

class BusCreated(CamelModel):
    message: str = "Bus added successfully"
    bus: Bus
