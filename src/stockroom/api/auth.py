"""Request authentication dependencies."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from stockroom.auth import get_authenticator
from stockroom.auth.port import Principal
from stockroom.exceptions import PermissionDenied

bearer_scheme = HTTPBearer(auto_error=False)


def current_principal(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> Principal:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Missing bearer token", headers={"WWW-Authenticate": "Bearer"})

    principal = get_authenticator().authenticate(credentials.credentials)
    if principal is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token", headers={"WWW-Authenticate": "Bearer"})
    return principal


def require_manager(principal: Principal = Depends(current_principal)) -> Principal:
    """Administrative actions are limited to owners and admins."""
    if not principal.can_manage:
        raise PermissionDenied(
            "Owner or admin role required",
            details={"principal": principal.id, "role": principal.role},
        )
    return principal
