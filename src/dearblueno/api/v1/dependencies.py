"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from dearblueno.core.errors import UnauthorizedError
from dearblueno.core.security import decode_subject
from dearblueno.db.session import get_db
from dearblueno.models import User

# Missing credentials are reported as 401 by the dependencies below.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _resolve_user(credentials: HTTPAuthorizationCredentials | None, db: Session) -> User:
    """Return the user named by a bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid or names no user.
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    try:
        subject = decode_subject(credentials.credentials)
    except JWTError as err:
        raise UnauthorizedError("Could not validate credentials") from err

    if subject is None or not subject.isdigit():
        raise UnauthorizedError("Could not validate credentials")

    user = db.get(User, int(subject))
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from the JWT bearer token."""
    return _resolve_user(credentials, db)


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Return the authenticated user, or None for anonymous callers."""
    if credentials is None:
        return None
    try:
        return _resolve_user(credentials, db)
    except UnauthorizedError:
        return None


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_current_moderator(current_user: CurrentUserDep) -> User:
    """Require a moderator; everyone else is treated as unauthenticated."""
    if not current_user.moderator:
        raise UnauthorizedError("Moderator privileges required")
    return current_user


ModeratorDep = Annotated[User, Depends(get_current_moderator)]
