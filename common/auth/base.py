"""
Identity provider interface.

Sign-up, sign-in and sessions belong to an external identity provider. The
API needs two things from it: turning a bearer token into claims, and
writing the public ``role`` claim when a user becomes an educator.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class AuthProvider(ABC):
    """Token verification and role claims for one identity provider."""

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a bearer token.

        Returns:
            Decoded claims with at least ``sub`` (the user ID); ``role`` is
            present once it has been set

        Raises:
            ValueError: If the token is invalid, expired or revoked
        """

    @abstractmethod
    async def set_user_role(self, user_id: str, role: str) -> None:
        """
        Write the public role claim ("student" or "educator").

        Raises:
            ValueError: If the user is unknown to the provider
        """
