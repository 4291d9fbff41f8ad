# staff-auth/staff_auth/api/endpoints/auth.py
from fastapi import APIRouter, Depends, status

from staff_auth.api.deps import get_auth_service, get_session_user
from staff_auth.core.errors import Messages
from staff_auth.core.security import get_current_claims
from staff_auth.db import models
from staff_auth.schemas import token as token_schema
from staff_auth.schemas import user as user_schema
from staff_auth.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=user_schema.MessageResponse, status_code=status.HTTP_201_CREATED)
def register(body: user_schema.RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """ Creates a user account. No token or session is issued. """
    service.register(
        name=body.name,
        username=body.username,
        password=body.password,
        role=body.role,
        available_days_off=body.available_days_off,
    )
    return {"message": Messages.REGISTERED.value}


@router.post("/login", response_model=token_schema.LoginResponse)
def login(body: user_schema.LoginRequest, service: AuthService = Depends(get_auth_service)):
    result = service.login(body.username, body.password)
    response = token_schema.LoginResponse(
        token=result.token,
        user=user_schema.UserOut.model_validate(result.user),
        session_id=result.session_id,
    )
    return response.model_dump(by_alias=True)


@router.get("/login", response_model=user_schema.SessionCheckResponse)
def check_session(user: models.User = Depends(get_session_user)):
    """ Confirms the caller still has a live session. """
    return {"user": user_schema.UserOut.model_validate(user).model_dump(by_alias=True)}


@router.post("/logout", response_model=user_schema.MessageResponse)
def logout(
    claims: token_schema.TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    service.logout(claims.user_id)
    return {"message": Messages.LOGGED_OUT.value}
