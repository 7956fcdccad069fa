"""
Domain: Appointments (bookings).

Read-only input to reporting: used for booking counts and completion rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from .time import require_utc_timestamp


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    BOOKED = "booked"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


@dataclass(frozen=True, slots=True)
class Appointment:
    appointment_id: UUID
    scheduled_start: datetime
    scheduled_end: datetime
    status: AppointmentStatus = AppointmentStatus.BOOKED
    customer_id: Optional[UUID] = None
    service_id: Optional[UUID] = None
    salon_id: Optional[UUID] = None
    employee_id: Optional[UUID] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("scheduled_start", self.scheduled_start)
        require_utc_timestamp("scheduled_end", self.scheduled_end)
        if self.scheduled_end < self.scheduled_start:
            raise ValueError("scheduled_end must be >= scheduled_start")


__all__ = ["AppointmentStatus", "Appointment"]
