# staff-auth/staff_auth/core/security.py
# Password hashing, JWT issue/verify and the bearer-token dependencies.
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from staff_auth.core.config import Settings
from staff_auth.core.errors import Messages, Unauthorized
from staff_auth.schemas.token import TokenClaims


# --- Password Hashing ---
class PasswordHasher:
    def __init__(self, rounds: int):
        self._context = CryptContext(schemes=["argon2"], deprecated="auto", argon2__rounds=rounds)

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        """A stored hash passlib cannot identify never matches."""
        try:
            return self._context.verify(plain, hashed)
        except (ValueError, TypeError):
            return False


# --- JWT Creation / Verification ---
class TokenIssuer:
    def __init__(self, secret_key: str, algorithm: str, expire_minutes: int):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expires_in = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM, settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def issue(self, user_id: int, role: Optional[str], now: datetime) -> str:
        to_encode = {"sub": str(user_id), "exp": now + self.expires_in}
        if role is not None:
            to_encode["role"] = role
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
            subject = payload.get("sub")
            if subject is None:
                raise Unauthorized(Messages.INVALID_TOKEN)
            return TokenClaims(user_id=int(subject), role=payload.get("role"))
        except (JWTError, ValueError):
            raise Unauthorized(Messages.INVALID_TOKEN)


# --- Bearer Dependencies ---
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthorized(Messages.NO_TOKEN)
    return credentials.credentials


def get_current_claims(request: Request, token: str = Depends(get_bearer_token)) -> TokenClaims:
    tokens: TokenIssuer = request.app.state.tokens
    return tokens.verify(token)
