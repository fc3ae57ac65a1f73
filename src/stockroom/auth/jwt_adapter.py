"""JWT authenticator: verifies HS256 tokens issued by the store's auth service.

Tokens carry `userId` and `role` claims.
"""

import jwt
import structlog

from stockroom.auth.port import AuthenticatorPort, Principal

logger = structlog.get_logger(__name__)


class JwtAuthenticator(AuthenticatorPort):
    def __init__(self, secret: str, algorithms: tuple[str, ...] = ("HS256",)):
        if not secret:
            raise ValueError("JWT authenticator requires a secret")
        self.secret = secret
        self.algorithms = list(algorithms)

    def authenticate(self, token: str) -> Principal | None:
        if not token:
            return None
        try:
            claims = jwt.decode(token, self.secret, algorithms=self.algorithms)
        except jwt.InvalidTokenError as exc:
            logger.info("token_rejected", reason=str(exc))
            return None

        user_id = claims.get("userId")
        role = claims.get("role")
        if not user_id or not role:
            return None
        return Principal(id=str(user_id), role=str(role).lower())
