"""
Security utilities for authentication: password hashing and JWT access tokens.
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
import bcrypt
from fastapi.security import HTTPBearer

import config

# Password hashing
# Configure to avoid wrap bug detection issues
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",  # Use bcrypt 2b identifier
    bcrypt__rounds=12  # Standard rounds
)

BCRYPT_MAX_BYTES = 72
SPECIAL_CHARS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

# Security schemes (missing credentials are reported as 401 by get_current_user)
security = HTTPBearer(auto_error=False)


# Password utilities
def validate_password(password: str) -> Tuple[bool, Optional[str]]:
    """
    Validate password strength.

    Requirements:
    - Minimum 6 characters
    - At least 1 number
    - At least 1 special character
    - Maximum 72 bytes (bcrypt limit)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not password:
        return False, "Password is required"

    if len(password) < 6:
        return False, "Password must be at least 6 characters long"

    if len(password.encode('utf-8')) > BCRYPT_MAX_BYTES:
        return False, "Password cannot be longer than 72 bytes. Please use a shorter password."

    if not any(char.isdigit() for char in password):
        return False, "Password must contain at least one number"

    if not any(char in SPECIAL_CHARS for char in password):
        return False, f"Password must contain at least one special character ({SPECIAL_CHARS})"

    return True, None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash. Empty hashes never match."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # Hash not in raw bcrypt form; let passlib identify it
        return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Note: Password validation should be done before calling this function.
    Use validate_password() to check password requirements.
    """
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        raise ValueError("Password cannot be longer than 72 bytes. Please use a shorter password.")

    # Use bcrypt directly to avoid passlib's wrap bug detection on newer bcrypt releases
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password_bytes, salt).decode('utf-8')


# JWT Token utilities
def create_access_token(
    data: Dict[str, Any],
    secret_key: str = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode (sub is stringified)
        secret_key: Signing key, defaults to config.SECRET_KEY
        expires_delta: Optional expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": "access"
    })
    return jwt.encode(to_encode, secret_key or config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str, secret_key: str = None) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a JWT access token.

    Returns:
        Decoded token data or None if invalid
    """
    try:
        payload = jwt.decode(token, secret_key or config.SECRET_KEY, algorithms=[config.ALGORITHM])
        if payload.get("type") != "access":
            return None
        return payload
    except JWTError:
        return None
