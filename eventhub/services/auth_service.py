"""Authentication service for user registration, login and session tokens."""
from eventhub.schemas import UserCreate, LoginRequest
from eventhub.db.repositories import Repository
from eventhub.db.models import User
from eventhub.core.security import issue_token, hash_password, verify_password, validate_password, dummy_verify
from eventhub.core.exceptions import ValidationError, ConflictError, InvalidCredentialsError
from eventhub.core.logging import logger


def normalize_email(email: str) -> str:
    return email.strip().lower()


def public_user(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email, "role": user.role}


class AuthService:
    """
    Service layer for authentication operations.

    Handles user registration, login and resolving the current user.
    """

    def __init__(self, repo: Repository):
        """
        Initialize AuthService with the repository.

        Args:
            repo: In-memory repository
        """
        self.repo = repo

    async def register(self, payload: UserCreate) -> dict:
        """
        Register a new user and issue a session token.

        Args:
            payload: Registration data containing name, email, password and role

        Returns:
            Dictionary with ``token`` and the public ``user`` fields

        Raises:
            ValidationError: If the password is weak
            ConflictError: If the email is already registered
        """
        try:
            validate_password(payload.password)
        except ValueError as e:
            raise ValidationError(str(e))

        email = normalize_email(payload.email)
        hashed_password = hash_password(payload.password)
        async with self.repo.transaction("users"):
            if self.repo.get_user_by_email(email):
                raise ConflictError("User already exists")
            user = self.repo.insert_user(User(
                name=payload.name,
                email=email,
                hashed_password=hashed_password,
                role=payload.role,
            ))

        logger.info(f"Registered user {user.id} as {user.role.value}")
        return {"token": issue_token(user), "user": public_user(user)}

    async def login(self, form_data: LoginRequest) -> dict:
        """
        Authenticate a user and issue a session token.

        Unknown email and wrong password produce the same error so the
        endpoint cannot be used to enumerate accounts.

        Raises:
            InvalidCredentialsError: If credentials are invalid
        """
        user = self.repo.get_user_by_email(normalize_email(form_data.email))
        if user is None:
            dummy_verify()
        if not user or not verify_password(form_data.password, user.hashed_password):
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        logger.info(f"User {user.id} logged in")
        return {"token": issue_token(user), "user": public_user(user)}

    async def me(self, user: User) -> dict:
        return {"user": public_user(user)}
