from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self) -> dict:
        """Only the fields the client actually sent, camelCase, without sendNotification."""
        data = self.model_dump(by_alias=True, exclude_unset=True, mode="json")
        data.pop("sendNotification", None)
        return data


class AppointmentIn(CamelModel):
    reservation_type: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    patient_id: Optional[Union[str, int]] = None
    patient_name: Optional[str] = None
    consultation: Optional[Union[str, list[str]]] = None
    facility_name: Optional[str] = None
    start_time_range: Optional[str] = None
    end_time_range: Optional[str] = None
    reason: Optional[str] = None
    send_notification: bool = False


class BlockedSlotIn(CamelModel):
    date: Optional[str] = None
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None
    send_notification: bool = False


class LoginRequest(CamelModel):
    user_id: str
    password: Optional[str] = None


class SetPasswordRequest(CamelModel):
    new_password: Optional[str] = None


class UserCreateRequest(CamelModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class UserUpdateRequest(CamelModel):
    name: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    must_change_password: Optional[bool] = None


class MessageResponse(BaseModel):
    message: str


class HolidayImportResponse(CamelModel):
    message: str
    added_count: int
