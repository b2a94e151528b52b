"""
Authentication dependencies.

Tokens are issued by the identity service; this API only verifies them.
The workspace and brand a request acts on come from the path
(``workspace_id`` / ``brand_id``) or, failing that, from the
``X-Workspace-Id`` / ``X-Brand-Id`` headers.

Usage:
    @router.get("/workspaces/{workspace_id}/things")
    async def handler(auth: RequestAuth = Depends(get_request_auth)):
        auth.user_id, auth.workspace_id
"""

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.core.config import settings
from workspace_access.models.user import User
from workspace_access.utils.context import set_context_user
from .database import get_db

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class RequestAuth:
    """Authenticated principal plus the workspace/brand the request targets."""
    user: User
    workspace_id: UUID | None = None
    brand_id: UUID | None = None

    @property
    def user_id(self) -> UUID:
        return self.user.id


def _parse_uuid(value: str | None, name: str) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "INVALID_ID", "message": f"Invalid {name}"},
        )


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": "UNAUTHORIZED", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get current authenticated user from the bearer JWT.

    Raises:
        HTTPException 401: missing or invalid token, unknown user
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.auth.secret_key,
            algorithms=[settings.auth.algorithm],
        )
    except JWTError:
        raise _unauthorized("Invalid token")

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized("Invalid token")

    user = await db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


async def get_request_auth(
    request: Request,
    user: User = Depends(get_current_user),
) -> RequestAuth:
    """Resolve the request's principal and target workspace/brand."""
    workspace_id = _parse_uuid(
        request.path_params.get("workspace_id")
        or request.headers.get(settings.auth.workspace_header),
        "workspace_id",
    )
    brand_id = _parse_uuid(
        request.path_params.get("brand_id")
        or request.headers.get(settings.auth.brand_header),
        "brand_id",
    )

    set_context_user(
        str(user.id),
        workspace_id=str(workspace_id) if workspace_id else None,
        brand_id=str(brand_id) if brand_id else None,
    )
    return RequestAuth(user=user, workspace_id=workspace_id, brand_id=brand_id)
