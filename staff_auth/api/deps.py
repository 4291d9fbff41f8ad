# staff-auth/staff_auth/api/deps.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from staff_auth.core.security import get_bearer_token, get_current_claims
from staff_auth.db import models
from staff_auth.db.session import get_db
from staff_auth.schemas.token import TokenClaims
from staff_auth.services.auth import AuthService


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    state = request.app.state
    return AuthService(db, state.settings, state.hasher, state.tokens, clock=state.clock)


def get_session_user(
    claims: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
) -> models.User:
    """Valid token and a live server-side session, regardless of policy."""
    return service.check_session(claims.user_id)


def get_protected_claims(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """Token check, plus the session check when REQUIRE_ACTIVE_SESSION is on."""
    return service.authenticate(token, require_session=service.settings.REQUIRE_ACTIVE_SESSION)
