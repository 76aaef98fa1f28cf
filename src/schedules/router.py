from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.database import get_db
from src.auth.dependencies import require_operator
from src.auth.schemas import Principal
from src.schemas import MessageResponse
from src.schedules.schemas import (
    ScheduleCreate, ScheduleUpdate, Schedule, ScheduleResponse, ScheduleListResponse
)
from src.schedules.service import ScheduleService

router = APIRouter()

@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
def add_schedule(
    request: ScheduleCreate,
    principal: Principal = Depends(require_operator),
    db: Session = Depends(get_db)
):
    """Publish a new schedule"""
    db_schedule = ScheduleService(db).create_schedule(principal, request)
    return ScheduleResponse(
        message="Schedule added successfully",
        schedule=Schedule.from_model(db_schedule)
    )

@router.get("", response_model=ScheduleListResponse)
def get_schedules_by_operator(
    principal: Principal = Depends(require_operator),
    db: Session = Depends(get_db)
):
    """Get schedules run by the calling operator"""
    schedules = ScheduleService(db).get_operator_schedules(principal)
    return ScheduleListResponse(schedules=[Schedule.from_model(s) for s in schedules])

@router.put("/{schedule_token}", response_model=ScheduleResponse)
def update_schedule(
    schedule_token: str,
    update: ScheduleUpdate,
    principal: Principal = Depends(require_operator),
    db: Session = Depends(get_db)
):
    """Replace the legs of a schedule"""
    db_schedule = ScheduleService(db).update_schedule(schedule_token, principal, update)
    return ScheduleResponse(
        message="Schedule updated successfully",
        schedule=Schedule.from_model(db_schedule)
    )

@router.delete("/{schedule_token}", response_model=MessageResponse)
def delete_schedule(
    schedule_token: str,
    principal: Principal = Depends(require_operator),
    db: Session = Depends(get_db)
):
    """Delete a schedule"""
    ScheduleService(db).delete_schedule(schedule_token, principal)
    return MessageResponse(message="Schedule deleted successfully")
