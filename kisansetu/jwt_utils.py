"""
JWT utilities for the KisanSetu application.

Tokens are issued by the authentication service; this module only validates
them. ``generate_test_token`` signs tokens with the configured secret so the
test suite can exercise authenticated endpoints.
"""

import logging
import time

import jwt
from django.conf import settings

logger = logging.getLogger(__name__)


class JWTManager:
    """
    JWT Manager for token validation (and test token generation).
    """

    def __init__(self):
        # Don't access settings immediately
        self._secret = None
        self._algorithm = None

    def _get_secret(self):
        """Get the signing secret, with lazy loading."""
        if self._secret is None:
            self._secret = getattr(settings, "JWT_SECRET", "kisansetu-dev-jwt-secret")
        return self._secret

    def _get_algorithm(self):
        """Get the JWT algorithm, with lazy loading."""
        if self._algorithm is None:
            self._algorithm = getattr(settings, "JWT_ALGORITHM", "HS256")
        return self._algorithm

    def generate_token(self, user_id, expires_in_hours=24, **claims):
        """
        Generate a JWT token for testing purposes.

        Args:
            user_id (str): The user ID to include in the token
            expires_in_hours (int): Token expiration time in hours

        Returns:
            str: JWT token string
        """
        now = int(time.time())
        payload = {
            "iat": now,
            "exp": now + (expires_in_hours * 3600),
        }
        if user_id is not None:
            payload["sub"] = str(user_id)
        audience = getattr(settings, "JWT_AUDIENCE", None)
        issuer = getattr(settings, "JWT_ISSUER", None)
        if audience:
            payload["aud"] = audience
        if issuer:
            payload["iss"] = issuer
        payload.update(claims)

        return jwt.encode(payload, self._get_secret(), algorithm=self._get_algorithm())

    def validate_token(self, token):
        """
        Validate a JWT token and extract the payload.

        Raises:
            jwt.InvalidTokenError: If token is invalid or expired
        """
        audience = getattr(settings, "JWT_AUDIENCE", None)
        issuer = getattr(settings, "JWT_ISSUER", None)
        options = {}
        if not audience:
            options["verify_aud"] = False
        try:
            return jwt.decode(
                token,
                self._get_secret(),
                algorithms=[self._get_algorithm()],
                audience=audience,
                issuer=issuer,
                options=options,
            )
        except jwt.ExpiredSignatureError:
            logger.error("Error while validating user token", extra={"error": "expired"})
            raise jwt.InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.error("Error while validating user token", extra={"error": str(e)})
            raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")

    def extract_user_id(self, token):
        """
        Extract user ID from a JWT token.

        Tokens minted by the marketplace's auth service carry the id in
        ``id``; standard tokens carry it in ``sub``.

        Returns:
            str: User ID from token, or None if invalid
        """
        try:
            payload = self.validate_token(token)
        except jwt.InvalidTokenError:
            return None
        user_id = payload.get("sub") or payload.get("id")
        return str(user_id) if user_id else None


# Global JWT manager instance - create lazily
_jwt_manager = None


def _get_jwt_manager():
    """Get the global JWT manager instance, creating it if needed."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager


def generate_test_token(user_id, expires_in_hours=24, **claims):
    """Generate a test JWT token for the given user ID."""
    return _get_jwt_manager().generate_token(user_id, expires_in_hours, **claims)


def validate_jwt_token(token):
    """Validate a JWT token and return the payload."""
    return _get_jwt_manager().validate_token(token)


def get_user_id_from_token(token):
    """Extract user ID from JWT token."""
    return _get_jwt_manager().extract_user_id(token)
