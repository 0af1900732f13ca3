"""Authentication dependencies for FastAPI routes."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from triagex.db.session import get_db
from triagex.models.user import User
from triagex.auth import jwt

_bearer_scheme = HTTPBearer(auto_error=False)

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_UNAUTHORIZED_HEADERS,
    )


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user from the Authorization bearer token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise _unauthorized("No token provided, authorization denied")

    payload = jwt.get_current_user_from_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token, authorization denied")

    user = db.get(User, str(payload["sub"]))
    if not user:
        raise _unauthorized("User not found, authorization denied")

    # Used by the per-user rate limit key
    request.state.user_id = str(user.id)
    return user


# Re-export helpers for convenience in other modules
hash_password = jwt.hash_password
verify_password = jwt.verify_password
create_access_token = jwt.create_access_token
