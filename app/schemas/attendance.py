"""Pydantic schemas for admin attendance views."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel


EmployeePresence = Literal["on_break", "timed_in", "on_leave", "offline"]


class EmployeeStatus(BaseModel):
    id: UUID
    name: str
    designation: str
    status: EmployeePresence
    time_in: datetime | None = None
    hours: str | None = None  # e.g. "3.5h"


class DayAverage(BaseModel):
    day: str  # Mon..Sun
    hours: float
