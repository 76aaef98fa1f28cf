"""Derived schedule identifiers.

A schedule is addressed externally by its ``scheduleToken``: the route number,
the bus registration, the departure date of the first leg and the route name
with every whitespace character removed, e.g.::

    "138" + "NB-1234" + "20241231" + "-" + "ColomboKurunegala"

The token is assigned once, when the schedule is created, and never
recomputed afterwards even if the legs change.
"""

from datetime import datetime
from typing import Optional


def strip_whitespace(value: str) -> str:
    return "".join(value.split())


def generate_schedule_token(
    route_number: str,
    registration_number: str,
    departure_time: datetime,
    route_name: str
) -> str:
    return f"{route_number}{registration_number}{departure_time:%Y%m%d}-{strip_whitespace(route_name)}"


def resolve_schedule_token(
    supplied_token: Optional[str],
    route_number: str,
    registration_number: str,
    first_departure: datetime,
    route_name: str
) -> str:
    """Keep a supplied token, otherwise derive one from the first leg"""
    if supplied_token:
        return supplied_token
    return generate_schedule_token(route_number, registration_number, first_departure, route_name)
