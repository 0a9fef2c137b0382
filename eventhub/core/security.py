"""
Credential hashing and the signed session token.

Tokens are HS256 JWTs carrying ``sub``/``user_id``, ``role`` and ``exp``.
Passwords are stored as salted bcrypt hashes.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
from jose import jwt, JWTError
from passlib.context import CryptContext
from eventhub.core.config import settings
from eventhub.schemas import TokenData

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidToken(ValueError):
    """Token could not be decoded, was tampered with, or lacks claims."""


class ExpiredToken(InvalidToken):
    """Token signature is valid but ``exp`` is in the past."""


def validate_password(password: str) -> None:
    """
    Validate password strength.

    Args:
        password: The password to validate

    Raises:
        ValueError: If password doesn't meet strength requirements
    """
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")

    if not any(c.isalpha() for c in password):
        raise ValueError("Password must contain at least one letter")

    if not any(c.isdigit() for c in password):
        raise ValueError("Password must contain at least one digit")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Burn the time of one verify when there is no stored hash to check."""
    pwd_context.dummy_verify()


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token.

    Args:
        data: Claims to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a session token for ``user``."""
    return create_access_token(
        {"sub": user.id, "user_id": user.id, "role": user.role.value},
        expires_delta=expires_delta,
    )


def decode_token(token: str) -> Dict:
    """
    Decode and validate a token.

    Raises:
        ExpiredToken: If the token has expired
        InvalidToken: If the token is malformed, unsigned or tampered with
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ExpiredToken("Token has expired")
    except JWTError as e:
        raise InvalidToken(f"Invalid token: {str(e)}")

    if "sub" not in payload:
        raise InvalidToken("Invalid token payload: missing 'sub' field")
    if payload.get("type") != "access":
        raise InvalidToken("Invalid token type")
    return payload


def verify_token(token: str) -> TokenData:
    """Decode ``token`` into its ``{user_id, role}`` claims."""
    payload = decode_token(token)
    return TokenData(user_id=payload["sub"], role=payload.get("role"))
