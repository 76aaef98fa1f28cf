"""Per-schedule seat ledger.

Two paths write to the same ledger with different policies:

* operators overwrite their own entry for a seat in place (last writer wins)
  and append one when the seat has none yet;
* reservations append a ``Reserved`` entry per held seat and never touch
  operator entries.

The same seat number can therefore appear twice, once per source. Readers go
through :func:`fold_seat_entries`, which resolves a seat as follows:

1. an operator ``NotAvailable`` or ``NotProvided`` entry wins;
2. otherwise a reservation ``Reserved`` entry wins;
3. otherwise the seat is ``Available``.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models import SeatStatus, SeatUpdate
from src.seats.schemas import (
    Gender, LedgerEntry, LedgerSource, MergedSeat, SeatState, SeatUpdateItem
)
from src.exceptions import ConflictError, ValidationError
from src.logger import logger

BLOCKING_OPERATOR_STATES = {SeatState.NOT_AVAILABLE, SeatState.NOT_PROVIDED}

# Dialects whose INSERT supports ON CONFLICT DO NOTHING
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def fold_seat_entries(entries: Iterable[LedgerEntry]) -> Dict[int, MergedSeat]:
    """Merge ledger entries into one status per recorded seat"""
    operator_entries: Dict[int, LedgerEntry] = {}
    reservation_entries: Dict[int, LedgerEntry] = {}

    for entry in entries:
        if entry.source == LedgerSource.OPERATOR:
            operator_entries[entry.seat_number] = entry
        elif entry.status == SeatState.RESERVED:
            reservation_entries.setdefault(entry.seat_number, entry)

    merged = {}
    for seat_number in sorted(set(operator_entries) | set(reservation_entries)):
        operator_entry = operator_entries.get(seat_number)
        reservation_entry = reservation_entries.get(seat_number)

        if operator_entry and operator_entry.status in BLOCKING_OPERATOR_STATES:
            merged[seat_number] = MergedSeat(status=operator_entry.status, gender=operator_entry.gender)
        elif reservation_entry:
            merged[seat_number] = MergedSeat(status=SeatState.RESERVED, gender=reservation_entry.gender)
        else:
            merged[seat_number] = MergedSeat(status=SeatState.AVAILABLE, gender=operator_entry.gender)

    return merged


def to_ledger_entry(seat_update: SeatUpdate) -> LedgerEntry:
    return LedgerEntry(
        seat_number=seat_update.seat_number,
        status=SeatState(seat_update.status),
        source=LedgerSource(seat_update.source),
        gender=Gender(seat_update.gender) if seat_update.gender else None
    )


class SeatLedger:
    """Reads and writes the seat ledger of a schedule"""

    def __init__(self, db: Session):
        self.db = db

    def get_ledger(self, schedule_id: str, for_update: bool = False) -> Optional[SeatStatus]:
        query = self.db.query(SeatStatus).filter(SeatStatus.schedule_id == schedule_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def entries(self, schedule_id: str) -> List[LedgerEntry]:
        """Ledger entries in insertion order; empty when no ledger exists"""
        ledger = self.get_ledger(schedule_id)
        if not ledger:
            return []
        return [to_ledger_entry(seat_update) for seat_update in ledger.seat_updates]

    def merged_status(self, schedule_id: str) -> Dict[int, MergedSeat]:
        return fold_seat_entries(self.entries(schedule_id))

    def reserved_seats(self, schedule_id: str, for_update: bool = False) -> Set[int]:
        """Seat numbers holding a Reserved entry"""
        ledger = self.get_ledger(schedule_id, for_update=for_update)
        if not ledger:
            return set()
        return {
            seat_update.seat_number
            for seat_update in ledger.seat_updates
            if seat_update.status == SeatState.RESERVED.value
        }

    def apply_operator_update(
        self,
        schedule_id: str,
        operator_name: str,
        updates: List[SeatUpdateItem],
        capacity: int
    ) -> SeatStatus:
        """Overwrite or append operator entries, one per seat, and commit"""
        self._check_seat_range([update.seat_number for update in updates], capacity)

        try:
            ledger = self._get_or_create_ledger(schedule_id, operator_name)
            operator_entries = {
                seat_update.seat_number: seat_update
                for seat_update in ledger.seat_updates
                if seat_update.source == LedgerSource.OPERATOR.value
            }

            for update in updates:
                gender = update.gender.value if update.gender else None
                existing = operator_entries.get(update.seat_number)
                if existing:
                    existing.status = update.status.value
                    existing.gender = gender
                else:
                    new_entry = SeatUpdate(
                        seat_number=update.seat_number,
                        status=update.status.value,
                        gender=gender,
                        source=LedgerSource.OPERATOR.value
                    )
                    ledger.seat_updates.append(new_entry)
                    operator_entries[update.seat_number] = new_entry

            ledger.operator_name = operator_name
            ledger.updated_at = datetime.now(timezone.utc)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Seat ledger was modified concurrently, please retry")

        self.db.refresh(ledger)
        logger.info(f"Operator '{operator_name}' updated {len(updates)} seat(s) on schedule {schedule_id}")
        return ledger

    def append_reservation_holds(
        self,
        schedule_id: str,
        operator_name: str,
        seat_numbers: List[int],
        gender: Optional[Gender] = None
    ) -> SeatStatus:
        """Append Reserved entries within the caller's transaction, without committing"""
        ledger = self._get_or_create_ledger(schedule_id, operator_name)
        for seat_number in seat_numbers:
            ledger.seat_updates.append(SeatUpdate(
                seat_number=seat_number,
                status=SeatState.RESERVED.value,
                gender=gender.value if gender else None,
                source=LedgerSource.RESERVATION.value
            ))
        ledger.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return ledger

    def _get_or_create_ledger(self, schedule_id: str, operator_name: str) -> SeatStatus:
        # Concurrent first writers both end up on the same header row
        insert = UPSERT_INSERTS[self.db.get_bind().dialect.name]
        self.db.execute(
            insert(SeatStatus)
            .values(schedule_id=schedule_id, operator_name=operator_name)
            .on_conflict_do_nothing(index_elements=["schedule_id"])
        )
        return self.get_ledger(schedule_id, for_update=True)

    @staticmethod
    def _check_seat_range(seat_numbers: List[int], capacity: int) -> None:
        out_of_range = sorted({n for n in seat_numbers if n < 1 or n > capacity})
        if out_of_range:
            raise ValidationError(
                f"Seat numbers must be between 1 and {capacity}: {out_of_range}"
            )
