import os

# Settings are read at import time, so the environment must be prepared first
os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_LEVEL'] = 'WARNING'

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.auth.schemas import Principal, UserRole  # noqa: E402
from src.auth.utils import create_access_token, get_password_hash  # noqa: E402
from src.database import Base, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models import Bus, Route, User  # noqa: E402
from src.schedules.schemas import ScheduleCreate  # noqa: E402
from src.schedules.service import ScheduleService  # noqa: E402
from tests.constants import (  # noqa: E402
    ADMIN_NAME,
    BUS_CAPACITY,
    COMMUTER_NAME,
    DEFAULT_PASSWORD,
    OPERATOR_NAME,
    OTHER_COMMUTER_NAME,
    OTHER_OPERATOR_NAME,
    REGISTRATION_NUMBER,
    ROUTE_NAME,
    ROUTE_NUMBER,
    TICKET_PRICE,
)


test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def schedule_payload(
    route_number: str = ROUTE_NUMBER,
    route_name: str = ROUTE_NAME,
    registration_number: str = REGISTRATION_NUMBER,
    operator_name: str = OPERATOR_NAME,
    capacity: int = BUS_CAPACITY,
    departure_time: str = '2024-12-31T06:00:00',
    arrival_time: str = '2024-12-31T09:00:00',
    start_date: str = '2024-12-01',
    end_date: str = '2025-01-31',
    **overrides,
) -> dict:
    payload = {
        'route': {'routeNumber': route_number, 'routeName': route_name},
        'bus': {
            'registrationNumber': registration_number,
            'operatorName': operator_name,
            'busType': 'Luxury',
            'ticketPrice': TICKET_PRICE,
            'capacity': capacity,
        },
        'schedule': [
            {
                'departurePoint': 'Colombo',
                'departureTime': departure_time,
                'arrivalPoint': 'Kurunegala',
                'arrivalTime': arrival_time,
                'stops': ['Kadawatha', 'Nittambuwa', 'Warakapola'],
            }
        ],
        'scheduleValid': {'startDate': start_date, 'endDate': end_date},
        'isActive': True,
    }
    payload.update(overrides)
    return payload


def auth_headers(user: User) -> dict:
    token = create_access_token({'sub': str(user.id), 'name': user.name, 'role': user.role})
    return {'Authorization': f'Bearer {token}'}


def principal_of(user: User) -> Principal:
    return Principal(id=user.id, name=user.name, role=UserRole(user.role))


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(name: str, role: str, email: str = None, password: str = DEFAULT_PASSWORD) -> User:
        user = User(
            name=name,
            email=email or f'{name.lower()}@example.com',
            password=get_password_hash(password),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(ADMIN_NAME, 'Admin')


@pytest.fixture
def operator_user(make_user):
    return make_user(OPERATOR_NAME, 'Operator')


@pytest.fixture
def other_operator_user(make_user):
    return make_user(OTHER_OPERATOR_NAME, 'Operator')


@pytest.fixture
def commuter_user(make_user):
    return make_user(COMMUTER_NAME, 'Commuter')


@pytest.fixture
def other_commuter_user(make_user):
    return make_user(OTHER_COMMUTER_NAME, 'Commuter')


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def operator_headers(operator_user):
    return auth_headers(operator_user)


@pytest.fixture
def other_operator_headers(other_operator_user):
    return auth_headers(other_operator_user)


@pytest.fixture
def commuter_headers(commuter_user):
    return auth_headers(commuter_user)


@pytest.fixture
def other_commuter_headers(other_commuter_user):
    return auth_headers(other_commuter_user)


@pytest.fixture
def route(db_session):
    db_route = Route(
        route_number=ROUTE_NUMBER,
        starting_point='Colombo',
        ending_point='Kurunegala',
        distance='94 km',
        is_active=True,
    )
    db_session.add(db_route)
    db_session.commit()
    db_session.refresh(db_route)
    return db_route


@pytest.fixture
def bus(db_session, route):
    db_bus = Bus(
        bus_id='24034',
        bus_number='B-501',
        registration_number=REGISTRATION_NUMBER,
        driver_name='Kamal Perera',
        operator_name=OPERATOR_NAME,
        bus_type='Luxury',
        capacity=BUS_CAPACITY,
        ticket_price=TICKET_PRICE,
        route_number=ROUTE_NUMBER,
        is_available=True,
    )
    db_session.add(db_bus)
    db_session.commit()
    db_session.refresh(db_bus)
    return db_bus


@pytest.fixture
def schedule(db_session, operator_user, route, bus):
    request = ScheduleCreate.model_validate(schedule_payload())
    return ScheduleService(db_session).create_schedule(principal_of(operator_user), request)
