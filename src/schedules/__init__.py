"""
Schedules Module

Operator-published trips: each schedule embeds a snapshot of its route and bus,
an ordered list of legs and a validity window, and is addressed by a derived
``scheduleToken``.

Key Components:
- identity.py: scheduleToken derivation
- validation.py: route/bus checks run before a schedule is persisted
- service.py: create, update (legs only), delete and list with ownership checks
- router.py: operator endpoints
- schemas.py: Pydantic models for schedules, legs and snapshots
"""

from .router import router
from .service import ScheduleService
from .validation import ScheduleValidator
from .identity import generate_schedule_token, resolve_schedule_token
from .schemas import (
    ScheduleLeg, RouteSnapshot, BusSnapshot, ScheduleValidity,
    ScheduleCreate, ScheduleUpdate, Schedule
)

__all__ = [
    "router",
    "ScheduleService",
    "ScheduleValidator",
    "generate_schedule_token",
    "resolve_schedule_token",
    "ScheduleLeg",
    "RouteSnapshot",
    "BusSnapshot",
    "ScheduleValidity",
    "ScheduleCreate",
    "ScheduleUpdate",
    "Schedule"
]
