# staff-auth/staff_auth/schemas/token.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from staff_auth.schemas.user import UserOut


class TokenClaims(BaseModel):
    user_id: int
    role: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    user: UserOut
    session_id: str = Field(alias="sessionId")

    model_config = ConfigDict(populate_by_name=True)


class ProtectedResponse(BaseModel):
    message: str
    user_id: int = Field(alias="userId")
    role: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
