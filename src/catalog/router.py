from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from src.database import get_db
from src.auth.dependencies import require_admin
from src.catalog.schemas import RouteCreate, Route, RouteCreated, BusCreate, Bus, BusCreated
from src.catalog.service import RouteService, BusService

router = APIRouter(dependencies=[Depends(require_admin)])

@router.post("/routes", response_model=RouteCreated, status_code=status.HTTP_201_CREATED)
def add_route(route: RouteCreate, db: Session = Depends(get_db)):
    """Add a new route"""
    db_route = RouteService.create_route(db, route)
    return RouteCreated(route=Route.model_validate(db_route))

@router.get("/routes", response_model=List[Route])
def get_routes(db: Session = Depends(get_db)):
    """Get all routes"""
    return RouteService.get_routes(db)

@router.post("/buses", response_model=BusCreated, status_code=status.HTTP_201_CREATED)
def add_bus(bus: BusCreate, db: Session = Depends(get_db)):
    """Add a new bus"""
    db_bus = BusService.create_bus(db, bus)
    return BusCreated(bus=Bus.model_validate(db_bus))

@router.get("/buses", response_model=List[Bus])
def get_buses(db: Session = Depends(get_db)):
    """Get all buses"""
    return BusService.get_buses(db)
