"""
Service tests for schedule publishing and maintenance

Test Focus:
1. The scheduleToken is derived from the first leg unless supplied
2. Referenced route and bus must exist, be active and belong to the operator
3. Updating legs keeps the scheduleToken
4. Only the owning operator can update or delete
"""

import pytest

from src.auth.schemas import Principal, UserRole
from src.exceptions import (
    AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from src.models import Schedule
from src.schedules.schemas import ScheduleCreate, ScheduleUpdate
from src.schedules.service import ScheduleService
from tests.conftest import principal_of, schedule_payload
from tests.constants import OTHER_OPERATOR_NAME, SCHEDULE_TOKEN


@pytest.fixture
def service(db_session):
    return ScheduleService(db_session)


@pytest.fixture
def operator(operator_user):
    return principal_of(operator_user)


@pytest.mark.service
class TestCreateSchedule:
    def test_token_and_snapshots_are_stored(self, service, operator, route, bus):
        schedule = service.create_schedule(operator, ScheduleCreate.model_validate(schedule_payload()))

        assert schedule.schedule_token == SCHEDULE_TOKEN
        assert schedule.route_name == 'Colombo Kurunegala'
        assert schedule.bus_available_seats == schedule.bus_capacity
        assert schedule.legs[0]['departurePoint'] == 'Colombo'
        assert schedule.legs[0]['stops'] == ['Kadawatha', 'Nittambuwa', 'Warakapola']

    def test_supplied_token_is_kept(self, service, operator, route, bus):
        payload = schedule_payload(scheduleToken='SL-5-MORNING')

        schedule = service.create_schedule(operator, ScheduleCreate.model_validate(payload))

        assert schedule.schedule_token == 'SL-5-MORNING'

    def test_duplicate_token(self, service, operator, schedule):
        with pytest.raises(ConflictError):
            service.create_schedule(operator, ScheduleCreate.model_validate(schedule_payload()))

    def test_unknown_route(self, service, operator, route, bus):
        payload = schedule_payload(route_number='999')

        with pytest.raises(NotFoundError) as exc_info:
            service.create_schedule(operator, ScheduleCreate.model_validate(payload))

        assert 'Route 999 does not exist' in exc_info.value.message

    def test_inactive_route(self, service, db_session, operator, route, bus):
        route.is_active = False
        db_session.commit()

        with pytest.raises(ValidationError) as exc_info:
            service.create_schedule(operator, ScheduleCreate.model_validate(schedule_payload()))

        assert exc_info.value.message == 'Selected route is not available or inactive. Please check!!'

    def test_unknown_bus(self, service, operator, route, bus):
        payload = schedule_payload(registration_number='ZZ-0000')

        with pytest.raises(NotFoundError):
            service.create_schedule(operator, ScheduleCreate.model_validate(payload))

    def test_snapshot_for_another_operator(self, service, operator, route, bus):
        payload = schedule_payload(operator_name=OTHER_OPERATOR_NAME)

        with pytest.raises(AuthorizationError):
            service.create_schedule(operator, ScheduleCreate.model_validate(payload))

    def test_bus_of_another_operator(self, service, other_operator_user, route, bus):
        payload = schedule_payload(operator_name=OTHER_OPERATOR_NAME)

        with pytest.raises(ValidationError) as exc_info:
            service.create_schedule(principal_of(other_operator_user), ScheduleCreate.model_validate(payload))

        assert 'is not operated by' in exc_info.value.message

    def test_principal_without_name(self, service, route, bus):
        principal = Principal(id=1, name=None, role=UserRole.OPERATOR)

        with pytest.raises(AuthenticationError):
            service.create_schedule(principal, ScheduleCreate.model_validate(schedule_payload()))


@pytest.mark.service
class TestUpdateSchedule:
    def test_token_survives_leg_change(self, service, db_session, operator, schedule):
        # When: the first leg moves to another day
        update = ScheduleUpdate.model_validate({
            'schedule': [{
                'departurePoint': 'Colombo',
                'departureTime': '2025-01-15T07:30:00',
                'arrivalPoint': 'Kurunegala',
                'arrivalTime': '2025-01-15T10:30:00',
            }]
        })
        updated = service.update_schedule(SCHEDULE_TOKEN, operator, update)

        # Then: the token still names the original departure date
        assert updated.schedule_token == SCHEDULE_TOKEN
        assert updated.legs[0]['departureTime'] == '2025-01-15T07:30:00'
        assert db_session.query(Schedule).count() == 1

    def test_schedule_section_is_required(self, service, operator, schedule):
        with pytest.raises(ValidationError) as exc_info:
            service.update_schedule(SCHEDULE_TOKEN, operator, ScheduleUpdate())

        assert exc_info.value.message == 'Only the schedule section can be updated'

    def test_empty_schedule_section(self, service, operator, schedule):
        with pytest.raises(ValidationError) as exc_info:
            service.update_schedule(SCHEDULE_TOKEN, operator, ScheduleUpdate(schedule=[]))

        assert exc_info.value.message == 'Invalid schedule data provided'

    def test_other_operator_cannot_update(self, service, other_operator_user, schedule):
        update = ScheduleUpdate(schedule=[])

        with pytest.raises(AuthorizationError):
            service.update_schedule(SCHEDULE_TOKEN, principal_of(other_operator_user), update)

    def test_unknown_schedule(self, service, operator, schedule):
        with pytest.raises(NotFoundError):
            service.update_schedule('missing-token', operator, ScheduleUpdate(schedule=[]))


@pytest.mark.service
class TestDeleteSchedule:
    def test_owner_deletes(self, service, db_session, operator, schedule):
        service.delete_schedule(SCHEDULE_TOKEN, operator)

        assert db_session.query(Schedule).count() == 0

    def test_other_operator_cannot_delete(self, service, db_session, other_operator_user, schedule):
        with pytest.raises(AuthorizationError):
            service.delete_schedule(SCHEDULE_TOKEN, principal_of(other_operator_user))

        assert db_session.query(Schedule).count() == 1

    def test_operator_lists_only_own_schedules(self, service, operator, other_operator_user, schedule):
        assert [s.schedule_token for s in service.get_operator_schedules(operator)] == [SCHEDULE_TOKEN]
        assert service.get_operator_schedules(principal_of(other_operator_user)) == []
