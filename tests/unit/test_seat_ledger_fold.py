"""
Unit tests for the seat ledger fold and the seat map projection

Test Focus:
1. Operator NotAvailable/NotProvided beats a reservation hold
2. A reservation hold beats an operator Available entry
3. Seats with no blocking entry fold to Available
4. The projected seat map has exactly one entry per seat 1..capacity
5. Availability counts every in-range seat that is not Available
"""

import pytest

from src.seats.layout import count_available, project_layout
from src.seats.ledger import fold_seat_entries
from src.seats.schemas import Gender, LedgerEntry, LedgerSource, MergedSeat, SeatState


def operator_entry(seat_number, status, gender=None):
    return LedgerEntry(seat_number=seat_number, status=status, source=LedgerSource.OPERATOR, gender=gender)


def reservation_entry(seat_number, gender=None):
    return LedgerEntry(
        seat_number=seat_number, status=SeatState.RESERVED, source=LedgerSource.RESERVATION, gender=gender
    )


@pytest.mark.unit
class TestFoldSeatEntries:
    def test_empty_ledger_folds_to_nothing(self):
        assert fold_seat_entries([]) == {}

    @pytest.mark.parametrize('blocking_status', [SeatState.NOT_AVAILABLE, SeatState.NOT_PROVIDED])
    def test_operator_block_wins_over_reservation(self, blocking_status):
        # Given: the seat was reserved and later blocked by the operator, in either order
        reserved_first = [reservation_entry(3, Gender.FEMALE), operator_entry(3, blocking_status)]
        blocked_first = list(reversed(reserved_first))

        # Then: the operator status is reported
        assert fold_seat_entries(reserved_first)[3].status == blocking_status
        assert fold_seat_entries(blocked_first)[3].status == blocking_status

    def test_reservation_wins_over_operator_available(self):
        entries = [operator_entry(7, SeatState.AVAILABLE), reservation_entry(7, Gender.MALE)]

        merged = fold_seat_entries(entries)

        assert merged[7] == MergedSeat(status=SeatState.RESERVED, gender=Gender.MALE)

    def test_operator_available_alone_is_available(self):
        merged = fold_seat_entries([operator_entry(2, SeatState.AVAILABLE, Gender.FEMALE)])

        assert merged[2].status == SeatState.AVAILABLE
        assert merged[2].gender == Gender.FEMALE

    def test_latest_operator_entry_counts(self):
        entries = [operator_entry(4, SeatState.NOT_AVAILABLE), operator_entry(4, SeatState.AVAILABLE)]

        assert fold_seat_entries(entries)[4].status == SeatState.AVAILABLE

    def test_operator_reserved_entry_does_not_hold_the_seat(self):
        # Only entries appended by reservations hold a seat
        entries = [operator_entry(9, SeatState.RESERVED)]

        assert fold_seat_entries(entries)[9].status == SeatState.AVAILABLE

    def test_unrelated_seats_are_kept_apart(self):
        entries = [
            reservation_entry(1),
            operator_entry(2, SeatState.NOT_PROVIDED),
            operator_entry(3, SeatState.AVAILABLE),
        ]

        merged = fold_seat_entries(entries)

        assert {n: s.status for n, s in merged.items()} == {
            1: SeatState.RESERVED,
            2: SeatState.NOT_PROVIDED,
            3: SeatState.AVAILABLE,
        }


@pytest.mark.unit
class TestProjectLayout:
    def test_empty_ledger_projects_all_available(self):
        seats = project_layout(45, {})

        assert len(seats) == 45
        assert [seat.seat_number for seat in seats] == list(range(1, 46))
        assert all(seat.status == SeatState.AVAILABLE for seat in seats)
        assert all(seat.gender is None for seat in seats)

    def test_merged_statuses_are_placed_on_their_seats(self):
        merged = {
            5: MergedSeat(status=SeatState.RESERVED, gender=Gender.MALE),
            7: MergedSeat(status=SeatState.NOT_AVAILABLE),
        }

        seats = project_layout(10, merged)

        assert len(seats) == 10
        assert seats[4].status == SeatState.RESERVED
        assert seats[4].gender == Gender.MALE
        assert seats[6].status == SeatState.NOT_AVAILABLE
        assert seats[0].status == SeatState.AVAILABLE

    def test_out_of_range_entries_are_ignored(self):
        merged = {11: MergedSeat(status=SeatState.RESERVED)}

        seats = project_layout(10, merged)

        assert len(seats) == 10
        assert all(seat.status == SeatState.AVAILABLE for seat in seats)


@pytest.mark.unit
class TestCountAvailable:
    def test_nothing_taken(self):
        assert count_available(45, {}) == 45

    def test_reserved_and_blocked_seats_are_taken(self):
        merged = {
            1: MergedSeat(status=SeatState.RESERVED),
            2: MergedSeat(status=SeatState.NOT_PROVIDED),
            3: MergedSeat(status=SeatState.NOT_AVAILABLE),
            4: MergedSeat(status=SeatState.AVAILABLE),
        }

        assert count_available(45, merged) == 42

    def test_out_of_range_seats_are_not_counted(self):
        merged = {50: MergedSeat(status=SeatState.RESERVED)}

        assert count_available(45, merged) == 45

    def test_sold_out(self):
        merged = {n: MergedSeat(status=SeatState.RESERVED) for n in range(1, 4)}

        assert count_available(3, merged) == 0
