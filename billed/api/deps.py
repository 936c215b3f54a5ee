"""API Dependencies"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from billed.api.repository import InMemoryRepository, UserRecord
from billed.core.security import decode_token

# Missing credentials are reported as 401 by get_current_user
security = HTTPBearer(auto_error=False)


def get_repository(request: Request) -> InMemoryRepository:
    return request.app.state.repository


async def get_current_user(
    repository: InMemoryRepository = Depends(get_repository),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserRecord:
    """
    User owning the bearer token.

    Raises:
        HTTPException: 401 when the token is missing, invalid or unknown
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    email = decode_token(credentials.credentials)
    user = repository.users.get(email) if email else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
