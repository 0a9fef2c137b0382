from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from eventhub.db.session import get_repository
from eventhub.db.repositories import Repository
from eventhub.db.models import User, RoleEnum
from eventhub.core.exceptions import UnauthenticatedError, ForbiddenError
from eventhub.core.security import verify_token, InvalidToken
from eventhub.core.logging import logger

# auto_error is off so a missing header produces our own 401 message
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: Repository = Depends(get_repository),
) -> User:
    """
    Resolve the acting user from the bearer token.

    Raises:
        UnauthenticatedError: If the token is absent, malformed, tampered
            with, expired, or names a user that no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("No token, authorization denied")

    try:
        claims = verify_token(credentials.credentials)
    except InvalidToken as e:
        logger.warning(f"Rejected token: {e}")
        raise UnauthenticatedError("Token is not valid")

    user = repo.get_user(claims.user_id)
    if user is None:
        logger.warning(f"Token names unknown user {claims.user_id}")
        raise UnauthenticatedError("Token is not valid")
    return user


def authorize(user: User, required_role: RoleEnum) -> None:
    """Raise ForbiddenError unless ``user`` holds ``required_role``."""
    if user.role != required_role:
        logger.warning(f"User {user.id} with role {user.role.value} denied {required_role.value} route")
        raise ForbiddenError("Not authorized")


def role_required(required_role: RoleEnum):
    """
    Dependency to require specific role for endpoint access.

    Args:
        required_role: Role required (e.g. RoleEnum.organizer)

    Returns:
        Dependency function
    """
    async def role_checker(user: User = Depends(get_current_user)) -> User:
        authorize(user, required_role)
        return user
    return role_checker
