"""
Security utilities for validating Supabase access tokens.
Members sign in through Supabase Auth; the API only verifies the tokens it is handed.
"""

import logging
from functools import lru_cache
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from ..config.settings import get_settings
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

SUPABASE_JWT_ALGORITHM = "HS256"


class SecurityManager:
    """
    Verifies access tokens issued by Supabase Auth.
    """

    def __init__(self):
        self.settings = get_settings()
        self.secret_key = self.settings.SUPABASE_JWT_SECRET
        self.audience = self.settings.SUPABASE_JWT_AUDIENCE
        self.algorithm = SUPABASE_JWT_ALGORITHM

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a Supabase access token.

        Args:
            token: JWT access token from the Authorization header

        Returns:
            dict: Decoded token payload

        Raises:
            AuthenticationError: If token is invalid, expired or has no subject
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
        except ExpiredSignatureError as e:
            logger.warning("Token has expired")
            raise AuthenticationError("Token expired", original_error=e)
        except JWTError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise AuthenticationError("Could not validate credentials", original_error=e)

        if not payload.get("sub"):
            logger.warning("Token missing subject (user_id)")
            raise AuthenticationError("Could not validate credentials")

        logger.debug(f"Token verified successfully for user: {payload['sub']}")
        return payload


@lru_cache()
def get_security_manager() -> SecurityManager:
    """Get cached security manager instance."""
    return SecurityManager()
