# staff-auth/staff_auth/services/auth.py
"""
Credential and session lifecycle: registration, login, token checks and
server-side session expiry.

Tokens and sessions expire independently. A token is verified by signature
alone; a session needs a store lookup and is deleted lazily the first time
it is found expired.
"""
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional, Union

from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from staff_auth.core.config import Settings
from staff_auth.core.errors import Conflict, Internal, Messages, NotFound, Unauthorized, ValidationFailed
from staff_auth.core.security import PasswordHasher, TokenIssuer
from staff_auth.db.models import Role, Session, User
from staff_auth.schemas.token import TokenClaims

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_ROLES = {role.value for role in Role}
_WHOLE_NUMBER = re.compile(r"\d+")
# Largest value a portable SQL INTEGER column holds
_MAX_DAYS_OFF = 2**31 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _trim(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def _parse_days_off(value: Union[int, str]) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    else:
        text = value.strip()
        if not _WHOLE_NUMBER.fullmatch(text) or len(text) > len(str(_MAX_DAYS_OFF)):
            return None
        parsed = int(text)
    if not 0 <= parsed <= _MAX_DAYS_OFF:
        return None
    return parsed


def whole_months_between(start: date, end: date) -> int:
    """Count complete calendar months from start to end, never negative."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


@dataclass
class LoginResult:
    token: str
    user: User
    session_id: str


class AuthService:
    def __init__(
        self,
        db: DbSession,
        settings: Settings,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        clock: Clock = utcnow,
    ):
        self.db = db
        self.settings = settings
        self.hasher = hasher
        self.tokens = tokens
        self.clock = clock
        self.session_expires_in = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)

    # --- Registration ---

    def default_available_days_off(self, today: date) -> int:
        months = whole_months_between(self.settings.LEAVE_ACCRUAL_REFERENCE_DATE, today)
        return self.settings.LEAVE_DAYS_PER_MONTH * months

    def register(
        self,
        name: Optional[str],
        username: Optional[str],
        password: Optional[str],
        role: Optional[str],
        available_days_off: Optional[Union[int, str]] = None,
    ) -> User:
        fields = {
            "name": _trim(name),
            "username": _trim(username),
            "password": _trim(password),
            "role": _trim(role),
        }
        errors = {field: Messages.FIELD_REQUIRED.value for field, value in fields.items() if not value}
        if fields["role"] and fields["role"] not in _ROLES:
            errors["role"] = Messages.INVALID_ROLE.value

        days_off = None
        supplied = available_days_off is not None and not (
            isinstance(available_days_off, str) and not available_days_off.strip()
        )
        if supplied:
            days_off = _parse_days_off(available_days_off)
            if days_off is None:
                errors["availableDaysOff"] = Messages.INVALID_DAYS_OFF.value
        if errors:
            raise ValidationFailed(errors)

        if days_off is None:
            days_off = self.default_available_days_off(self.clock().date())

        try:
            existing = self.db.query(User).filter(User.username == fields["username"]).first()
        except SQLAlchemyError:
            logger.exception("User lookup failed during registration")
            raise Internal(Messages.REGISTRATION_FAILED)
        if existing is not None:
            raise Conflict(Messages.USERNAME_EXISTS)

        try:
            hashed_password = self.hasher.hash(fields["password"])
        except Exception:
            logger.exception("Password hashing failed")
            raise Internal(Messages.REGISTRATION_FAILED)

        now = self.clock()
        user = User(
            name=fields["name"],
            username=fields["username"],
            hashed_password=hashed_password,
            role=fields["role"],
            available_days_off=days_off,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # The unique index decides a racing double registration
            self.db.rollback()
            raise Conflict(Messages.USERNAME_EXISTS)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Persisting new user failed")
            raise Internal(Messages.REGISTRATION_FAILED)

        logger.info("Registered user %s (id=%s, role=%s)", user.username, user.id, user.role)
        return user

    # --- Login ---

    def login(self, username: Optional[str], password: Optional[str]) -> LoginResult:
        username, password = _trim(username), _trim(password)
        # Blank input gets the same coarse answer as bad credentials
        if not username or not password:
            raise Unauthorized(Messages.INVALID_CREDENTIALS)

        try:
            user = self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError:
            logger.exception("User lookup failed during login")
            raise Internal(Messages.LOGIN_FAILED)
        if user is None or not self.hasher.verify(password, user.hashed_password):
            logger.info("Rejected login for %s", username)
            raise Unauthorized(Messages.INVALID_CREDENTIALS)

        now = self.clock()
        try:
            token = self.tokens.issue(user.id, user.role, now)
        except JWTError:
            logger.exception("Token signing failed")
            raise Internal(Messages.LOGIN_FAILED)

        session = Session(
            session_id=str(uuid.uuid4()),
            user_id=user.id,
            created_at=now,
            expires_at=now + self.session_expires_in,
        )
        try:
            if self.settings.SINGLE_SESSION_PER_USER:
                self.db.query(Session).filter(Session.user_id == user.id).delete()
            self.db.add(session)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Persisting session failed")
            raise Internal(Messages.LOGIN_FAILED)

        logger.info("Login: %s (id=%s, session=%s)", user.username, user.id, session.session_id)
        return LoginResult(token=token, user=user, session_id=session.session_id)

    # --- Request authentication ---

    def authenticate(self, token: str, require_session: bool = False) -> TokenClaims:
        claims = self.tokens.verify(token)
        if require_session:
            self.check_session(claims.user_id)
        return claims

    def check_session(self, user_id: int) -> User:
        """Return the user if their latest session is still live.

        An expired session is deleted as a side effect; the delete is a
        no-op if a concurrent request already removed it.
        """
        now = self.clock()
        try:
            latest = (
                self.db.query(Session)
                .filter(Session.user_id == user_id)
                .order_by(Session.created_at.desc())
                .first()
            )
            if latest is None:
                raise Unauthorized(Messages.SESSION_EXPIRED)
            if _as_utc(latest.expires_at) <= now:
                self.db.query(Session).filter(Session.session_id == latest.session_id).delete()
                self.db.commit()
                logger.info("Session %s for user %s expired and was removed", latest.session_id, user_id)
                raise Unauthorized(Messages.SESSION_EXPIRED)
            user = self.db.get(User, user_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Session check failed")
            raise Internal()
        if user is None:
            raise NotFound(Messages.USER_NOT_FOUND)
        return user

    def logout(self, user_id: int) -> int:
        try:
            removed = self.db.query(Session).filter(Session.user_id == user_id).delete()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Logout failed")
            raise Internal()
        logger.info("Logout: user %s, %d session(s) removed", user_id, removed)
        return removed
