# ==============================================================================
# SECURITY MODULE - Verified Caller Assertion
# ==============================================================================
# JWT verification for tokens issued by the identity provider
# The core trusts the identity it is given; it never stores credentials
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt

from order_desk.core.settings import settings
from order_desk.core.exceptions import (
    TokenExpiredError,
    InvalidTokenError,
)


class TokenType:
    """Token type constants."""
    ACCESS = "access"


@dataclass(frozen=True)
class CallerIdentity:
    """
    Verified caller as asserted by the identity provider.

    Attributes:
        user_id: Identity provider user id (the token subject)
        role: Role claim, if any
    """

    user_id: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == settings.ADMIN_ROLE


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a JWT access token.

    Tokens are normally minted by the identity provider; this helper
    produces the same shape for local tooling and tests.

    Args:
        subject: Token subject (user ID)
        expires_delta: Custom expiration time (default from settings)
        additional_claims: Extra claims to include in token (e.g. role)

    Returns:
        Encoded JWT access token string

    Example:
        >>> token = create_access_token("user_123", additional_claims={"role": "admin"})
        >>> verify_access_token(token).is_admin
        True
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode: Dict[str, Any] = {
        "sub": str(subject),
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": TokenType.ACCESS,
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT token.

    Verifies the token signature and expiration time.

    Raises:
        TokenExpiredError: If token has expired
        InvalidTokenError: If token is invalid or malformed
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        raise InvalidTokenError(message=f"Invalid token: {str(e)}")


def verify_access_token(token: str) -> CallerIdentity:
    """
    Verify an access token and return the caller it asserts.

    Raises:
        InvalidTokenError: If token is not an access token or has no subject
        TokenExpiredError: If token has expired
    """
    payload = decode_token(token)

    if payload.get("type", TokenType.ACCESS) != TokenType.ACCESS:
        raise InvalidTokenError(message="Invalid token type: expected access token")

    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError(message="Invalid token payload: missing subject")

    return CallerIdentity(user_id=str(subject), role=payload.get("role"))
