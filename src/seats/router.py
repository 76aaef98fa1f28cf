from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from src.database import get_db
from src.auth.dependencies import require_operator
from src.auth.schemas import Principal
from src.schedules.service import ScheduleService
from src.seats.ledger import SeatLedger, fold_seat_entries, to_ledger_entry
from src.seats.layout import project_layout
from src.seats.schemas import SeatUpdateRequest, SeatLedgerView

router = APIRouter()

def build_ledger_view(db: Session, schedule) -> SeatLedgerView:
    ledger = SeatLedger(db).get_ledger(schedule.schedule_token)
    entries = [to_ledger_entry(seat_update) for seat_update in ledger.seat_updates] if ledger else []
    return SeatLedgerView(
        schedule_id=schedule.schedule_token,
        operator_name=ledger.operator_name if ledger else None,
        updated_at=ledger.updated_at if ledger else None,
        seat_updates=entries,
        seats=project_layout(schedule.bus_capacity, fold_seat_entries(entries))
    )

@router.post("/{schedule_id}/update-seats", response_model=SeatLedgerView)
def update_seats(
    schedule_id: str,
    request: SeatUpdateRequest,
    principal: Principal = Depends(require_operator),
    db: Session = Depends(get_db)
):
    """Set operator seat statuses for a schedule"""
    schedule = ScheduleService(db).get_owned_schedule(schedule_id, principal)
    SeatLedger(db).apply_operator_update(
        schedule_id=schedule.schedule_token,
        operator_name=principal.name,
        updates=request.seat_updates,
        capacity=schedule.bus_capacity
    )
    return build_ledger_view(db, schedule)

@router.get("/{schedule_id}/seats", response_model=SeatLedgerView)
def get_seat_availability(
    schedule_id: str,
    principal: Principal = Depends(require_operator),
    db: Session = Depends(get_db)
):
    """Get the seat ledger and seat map of a schedule"""
    schedule = ScheduleService(db).get_owned_schedule(schedule_id, principal)
    return build_ledger_view(db, schedule)
