"""JWT handler for token creation and validation."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from carrental.config import settings
from carrental.domain.exceptions import InvalidTokenException, TokenExpiredException

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "uid", "role", "exp", "iat"]


class JWTHandler:
    """JWT handler for creating and validating access tokens."""

    def __init__(
        self,
        secret: str = settings.jwt_secret,
        algorithm: str = settings.jwt_algorithm,
        issuer: str = settings.jwt_issuer,
        audience: str = settings.jwt_audience,
        expires_in_minutes: int = settings.jwt_access_token_expires_minutes,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.expires_in_minutes = expires_in_minutes

    def create_access_token(
        self,
        email: str,
        user_id: int,
        role: str,
        expires_in_minutes: Optional[int] = None,
    ) -> str:
        """Create access token carrying email, numeric user id and role name."""
        if expires_in_minutes is None:
            expires_in_minutes = self.expires_in_minutes

        now = datetime.now(timezone.utc)
        payload = {
            "sub": email,
            "uid": str(user_id),
            "role": role,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + timedelta(minutes=expires_in_minutes),
            "type": "access",
        }

        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return token

    def validate_token(self, token: str) -> Dict:
        """Validate and decode token."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": REQUIRED_CLAIMS},
            )
            return payload
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise TokenExpiredException()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            raise InvalidTokenException(f"Invalid token: {e}")

    def validate_access_token(self, token: str) -> Dict:
        """Validate access token specifically."""
        payload = self.validate_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenException("Token is not an access token")
        try:
            payload["uid"] = int(payload["uid"])
        except (TypeError, ValueError):
            raise InvalidTokenException("Token carries a malformed user id")
        return payload
