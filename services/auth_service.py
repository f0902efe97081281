"""
services/auth_service.py
------------------------
Staff authentication: sign-up, sign-in, login sessions and password resets.

Passwords are stored as werkzeug hashes. Users leave this module as
dicts from `User.public()`, never with their password hash.
"""

import secrets
from dataclasses import dataclass
from typing import Optional

from dateutil.relativedelta import relativedelta
from werkzeug.security import check_password_hash, generate_password_hash

from config import PASSWORD_RESET_TTL_HOURS, SESSION_TTL_DAYS
from db.errors import ErrorKind, classify_error
from db.results import MutationResult, QueryResult
from models.user import Session
from repositories.user_repo import PasswordResetRepository, SessionRepository, UserRepository
from services.errors import AuthenticationError, ConflictError
from utils.helpers import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthResult:
    """
    Outcome of an authentication call.

    Attributes:
        user: Public user dict (no password hash), or None.
        session: The login Session, or None.
        error: What went wrong, or None.
    """
    user: Optional[dict] = None
    session: Optional[Session] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Authenticates staff members against the users table."""

    def __init__(self, db, session_ttl: relativedelta = None, reset_ttl: relativedelta = None):
        self.db = db
        self.users = UserRepository(db)
        self.sessions = SessionRepository(db)
        self.resets = PasswordResetRepository(db)
        self.session_ttl = session_ttl or relativedelta(days=SESSION_TTL_DAYS)
        self.reset_ttl = reset_ttl or relativedelta(hours=PASSWORD_RESET_TTL_HOURS)

    # ── SIGN UP / IN / OUT ────────────────────────────────

    def sign_up(self, email: str, password: str, full_name: str, phone: str = None) -> AuthResult:
        """Create an account and log it in, atomically."""
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(error=ValueError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters"))

        email = _normalize_email(email)
        password_hash = generate_password_hash(password)

        def unit(tx):
            created = UserRepository(tx).add(email, password_hash, full_name, phone)
            if created.error:
                return created
            session = SessionRepository(tx).add(created.data.id, utc_now() + self.session_ttl)
            if session.error:
                return session
            return QueryResult.success((created.data, session.data))

        result = self.db.transaction(unit)
        if result.error:
            if classify_error(result.error) is ErrorKind.DUPLICATE_KEY:
                logger.warning(f"Sign-up refused, email already registered: {email}")
                return AuthResult(error=ConflictError("Email already registered"))
            logger.error(f"Sign-up failed for {email}: {result.error}")
            return AuthResult(error=result.error)

        user, session = result.data
        logger.info(f"New user signed up: {email} ({user.id})")
        return AuthResult(user=user.public(), session=session)

    def sign_in(self, email: str, password: str) -> AuthResult:
        email = _normalize_email(email)
        found = self.users.get_by_email(email)
        if found.error:
            logger.error(f"Sign-in lookup failed for {email}: {found.error}")
            return AuthResult(error=found.error)

        user = found.data
        if user is None or not check_password_hash(user.password_hash, password):
            logger.warning(f"Failed sign-in attempt for {email}")
            return AuthResult(error=AuthenticationError(INVALID_CREDENTIALS))

        session = self.sessions.add(user.id, utc_now() + self.session_ttl)
        if session.error:
            logger.error(f"Could not create a session for {email}: {session.error}")
            return AuthResult(error=session.error)

        logger.info(f"User signed in: {email}")
        return AuthResult(user=user.public(), session=session.data)

    def sign_out(self, session_id: str) -> MutationResult:
        result = self.sessions.delete(session_id)
        if result.error:
            logger.error(f"Sign-out failed for session {session_id}: {result.error}")
            return MutationResult.failed(result.error)
        return MutationResult.done()

    def get_session(self, session_id: str) -> AuthResult:
        """Resolve a session id to its user; expired sessions are removed."""
        found = self.sessions.get_by_id(session_id)
        if found.error:
            logger.error(f"Session lookup failed for {session_id}: {found.error}")
            return AuthResult(error=found.error)

        session = found.data
        if session is None:
            return AuthResult(error=AuthenticationError("Session not found"))
        if session.is_expired():
            self.sessions.delete(session_id)
            logger.info(f"Session {session_id} expired and was removed")
            return AuthResult(error=AuthenticationError("Session expired"))

        user = self.users.get_by_id(session.user_id)
        if user.error:
            return AuthResult(error=user.error)
        if user.data is None:
            return AuthResult(error=AuthenticationError("Session user no longer exists"))
        return AuthResult(user=user.data.public(), session=session)

    # ── PASSWORD RESET ────────────────────────────────────

    def request_password_reset(self, email: str) -> QueryResult:
        """
        Issue a reset token for `email`, replacing any earlier one.

        Unknown addresses also succeed, with data None, so callers cannot
        tell which accounts exist.
        """
        email = _normalize_email(email)
        found = self.users.get_by_email(email)
        if found.error:
            logger.error(f"Password reset lookup failed for {email}: {found.error}")
            return found
        if found.data is None:
            logger.info(f"Password reset requested for unknown email {email}")
            return QueryResult.success(None)

        user_id = found.data.id
        token = secrets.token_urlsafe(32)

        def unit(tx):
            resets = PasswordResetRepository(tx)
            cleared = resets.delete_for_user(user_id)
            if cleared.error:
                return cleared
            return resets.add(user_id, token, utc_now() + self.reset_ttl)

        result = self.db.transaction(unit)
        if result.error:
            logger.error(f"Could not issue password reset for {email}: {result.error}")
            return result
        logger.info(f"Password reset issued for {email}")
        return QueryResult.success(token)

    def reset_password(self, token: str, new_password: str) -> MutationResult:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return MutationResult.failed(
                ValueError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")
            )

        found = self.resets.get_by_token(token)
        if found.error:
            logger.error(f"Password reset lookup failed: {found.error}")
            return MutationResult.failed(found.error)

        reset = found.data
        if reset is None:
            return MutationResult.failed(AuthenticationError("Invalid reset token"))
        if reset.is_expired():
            self.resets.delete(reset.id)
            logger.info(f"Expired reset token for user {reset.user_id} was removed")
            return MutationResult.failed(AuthenticationError("Reset token expired"))

        password_hash = generate_password_hash(new_password)

        def unit(tx):
            updated = UserRepository(tx).update_password(reset.user_id, password_hash)
            if updated.error:
                return updated
            return PasswordResetRepository(tx).delete(reset.id)

        result = self.db.transaction(unit)
        if result.error:
            logger.error(f"Password reset failed for user {reset.user_id}: {result.error}")
            return MutationResult.failed(result.error)
        logger.info(f"Password reset completed for user {reset.user_id}")
        return MutationResult.done()
