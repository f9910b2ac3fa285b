"""
Shared-secret JWT identity provider.

For local development and for identity providers that sign session tokens
with a secret shared with the API (JWT templates). ``create_token`` mints
tokens the same way, which is what development tools and tests use.

Example:
    auth = JWTAuth(secret="dev-secret")

    token = await auth.create_token("user_123", role="educator")
    claims = await auth.verify_token(token)
    print(claims["sub"], claims["role"])
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import jwt, JWTError

from common.auth.base import AuthProvider


class JWTAuth(AuthProvider):
    """
    Verifies symmetric JWTs.

    Claims are exactly what the issuer signed. The provider keeps no
    per-user state, so role changes live on the stored user record.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
    ):
        """
        Args:
            secret: Signing secret shared with the token issuer
            algorithm: JWT algorithm
            access_token_expire_minutes: Lifetime of tokens from create_token
        """
        self.secret = secret
        self.algorithm = algorithm
        self.token_lifetime = timedelta(minutes=access_token_expire_minutes)

    async def create_token(self, user_id: str, **claims: Any) -> str:
        issued_at = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.token_lifetime,
            **claims,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")

    async def set_user_role(self, user_id: str, role: str) -> None:
        """
        No-op. Signed tokens cannot be rewritten, and the role written to the
        user record is what ``require_educator`` falls back to.
        """
