"""Authentication routes for user registration, login and the current user."""
from fastapi import APIRouter, Depends, Request, status
from eventhub.schemas import UserCreate, LoginRequest, AuthResponse, MeResponse
from eventhub.services.auth_service import AuthService
from eventhub.db.session import get_repository
from eventhub.db.repositories import Repository
from eventhub.db.models import User
from eventhub.auth import get_current_user
from eventhub.core.config import settings
from slowapi import Limiter
from slowapi.util import get_remote_address

router = APIRouter(prefix="/auth", tags=["auth"])
limiter = Limiter(key_func=get_remote_address)


def get_auth_service(repo: Repository = Depends(get_repository)) -> AuthService:
    """
    Dependency injection for AuthService.

    Args:
        repo: In-memory repository

    Returns:
        AuthService instance
    """
    return AuthService(repo)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    payload: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user account and return a session token.

    Raises:
        ValidationError: If the password is weak
        ConflictError: If the email already exists
    """
    return await auth_service.register(payload)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    form_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Exchange email and password for a session token.

    Raises:
        InvalidCredentialsError: If credentials are invalid
    """
    return await auth_service.login(form_data)


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Public profile of the user the bearer token belongs to."""
    return await auth_service.me(current_user)
