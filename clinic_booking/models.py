# clinic_booking/models.py
from __future__ import annotations

import enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from .services.intervals import (
    BlockedPeriod,
    Instant,
    TimeRange,
    parse_date,
    parse_time,
)


class ReservationType(str, enum.Enum):
    outpatient = "outpatient"
    visit = "visit"
    rehab = "rehab"
    special = "special"


class Role(str, enum.Enum):
    admin = "admin"
    general = "general"
    viewer = "viewer"


class Record(BaseModel):
    """Stored row; serialized with the camelCase keys of db.json."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    is_deleted: bool = False
    last_updated_by: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AppointmentBase(Record):
    id: int
    date: str
    created_at: Optional[str] = None
    last_updated_at: Optional[str] = None

    def footprint(self) -> Optional[Union[Instant, TimeRange]]:
        raise NotImplementedError


def _as_text(value):
    # older data files may hold numeric patient IDs
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _InstantMixin:
    def footprint(self) -> Optional[Instant]:
        if not self.time:
            return None
        return Instant(parse_date(self.date), parse_time(self.time))


class _RangeMixin:
    def footprint(self) -> Optional[TimeRange]:
        if not (self.start_time_range and self.end_time_range):
            return None
        return TimeRange(
            parse_date(self.date),
            parse_time(self.start_time_range, "startTimeRange"),
            parse_time(self.end_time_range, "endTimeRange"),
        )


class OutpatientAppointment(_InstantMixin, AppointmentBase):
    reservation_type: Literal["outpatient"] = "outpatient"
    time: Optional[str] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    consultation: Optional[Union[str, list[str]]] = None

    @field_validator("patient_id", mode="before")
    @classmethod
    def patient_id_as_text(cls, value):
        return _as_text(value)


class VisitAppointment(_RangeMixin, AppointmentBase):
    reservation_type: Literal["visit"] = "visit"
    start_time_range: Optional[str] = None
    end_time_range: Optional[str] = None
    facility_name: Optional[str] = None
    consultation: Optional[Union[str, list[str]]] = None


class RehabAppointment(_RangeMixin, AppointmentBase):
    reservation_type: Literal["rehab"] = "rehab"
    start_time_range: Optional[str] = None
    end_time_range: Optional[str] = None


class SpecialAppointment(_InstantMixin, AppointmentBase):
    reservation_type: Literal["special"] = "special"
    time: Optional[str] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("patient_id", mode="before")
    @classmethod
    def patient_id_as_text(cls, value):
        return _as_text(value)


Appointment = Annotated[
    Union[OutpatientAppointment, VisitAppointment, RehabAppointment, SpecialAppointment],
    Field(discriminator="reservation_type"),
]

appointment_adapter: TypeAdapter = TypeAdapter(Appointment)


def appointment_from_dict(data: dict) -> AppointmentBase:
    """Build the variant for data["reservationType"], dropping other kinds' fields."""
    return appointment_adapter.validate_python(data)


class BlockedSlot(Record):
    id: int
    date: str
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None
    created_at: Optional[str] = None
    last_updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        # endDate/startTime/endTime are kept as explicit nulls for the client
        data = super().to_dict()
        for key in ("endDate", "startTime", "endTime"):
            data.setdefault(key, None)
        return data

    def footprint(self) -> BlockedPeriod:
        start = parse_date(self.date)
        end = parse_date(self.end_date, "endDate") if self.end_date else start
        if self.start_time and self.end_time:
            return BlockedPeriod(
                start,
                end,
                parse_time(self.start_time, "startTime"),
                parse_time(self.end_time, "endTime"),
            )
        return BlockedPeriod(start, end)


class User(Record):
    user_id: str
    password: Optional[str] = None
    name: str
    department: Optional[str] = None
    email: Optional[str] = None
    role: Role = Role.general
    must_change_password: bool = False

    def public_dict(self) -> dict:
        data = self.to_dict()
        data.pop("password", None)
        return data
