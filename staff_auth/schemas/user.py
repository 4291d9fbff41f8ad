# staff-auth/staff_auth/schemas/user.py
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Fields are optional here so the service can report every missing field at once
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    available_days_off: Optional[Union[int, str]] = Field(default=None, alias="availableDaysOff")

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    name: str
    username: str
    role: str
    available_days_off: int = Field(alias="availableDaysOff")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


class SessionCheckResponse(BaseModel):
    user: UserOut
