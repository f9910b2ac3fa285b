"""
Firebase Authentication identity provider.

Verifies Firebase ID tokens and stores the public role as the ``role``
custom claim, which appears on every ID token issued after the change.

Credentials come from, in order: a service account file, service account
fields in the environment (PROJECT_ID, PRIVATE_KEY, CLIENT_EMAIL), or the
platform's application default credentials.
"""

import logging
import os
from typing import Dict, Any, Optional

import firebase_admin
from dotenv import load_dotenv
from firebase_admin import auth, credentials

from common.auth.base import AuthProvider

load_dotenv()

logger = logging.getLogger(__name__)


def _env(name: str, default: str = "") -> str:
    # Values pasted from a service account JSON often keep quotes and commas
    return os.environ.get(name, default).strip().strip(",").strip('"')


def _service_account_from_env() -> Optional[Dict[str, Any]]:
    if not (_env("PROJECT_ID") and _env("PRIVATE_KEY") and _env("CLIENT_EMAIL")):
        return None

    return {
        "type": _env("TYPE", "service_account"),
        "project_id": _env("PROJECT_ID"),
        "private_key_id": _env("PRIVATE_KEY_ID"),
        "private_key": _env("PRIVATE_KEY").replace("\\n", "\n"),
        "client_email": _env("CLIENT_EMAIL"),
        "client_id": _env("CLIENT_ID"),
        "token_uri": _env("TOKEN_URI", "https://oauth2.googleapis.com/token"),
    }


def _load_credentials(credentials_path: Optional[str]):
    if credentials_path:
        return credentials.Certificate(credentials_path)

    service_account = _service_account_from_env()
    if service_account:
        return credentials.Certificate(service_account)

    logger.info("No Firebase service account configured, using application default credentials")
    return credentials.ApplicationDefault()


class FirebaseAuth(AuthProvider):
    """Firebase Admin SDK backed identity provider."""

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        project_id: Optional[str] = None,
    ):
        """
        Args:
            credentials_path: Path to a service account JSON file
            project_id: Firebase project ID, when it cannot be inferred
        """
        # The Admin SDK keeps one default app per process
        if not firebase_admin._apps:
            options = {"projectId": project_id} if project_id else {}
            firebase_admin.initialize_app(_load_credentials(credentials_path), options)

        self._auth = auth

    async def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            claims = self._auth.verify_id_token(token)
        except self._auth.RevokedIdTokenError:
            raise ValueError("Token has been revoked")
        except self._auth.ExpiredIdTokenError:
            raise ValueError("Token has expired")
        except (self._auth.InvalidIdTokenError, ValueError) as e:
            raise ValueError(f"Invalid token: {e}")

        claims["sub"] = claims.get("uid")
        return claims

    async def set_user_role(self, user_id: str, role: str) -> None:
        """Write the role custom claim, keeping any other custom claims."""
        try:
            user = self._auth.get_user(user_id)
        except self._auth.UserNotFoundError:
            raise ValueError(f"User {user_id} not found")

        custom_claims = dict(user.custom_claims or {})
        custom_claims["role"] = role
        self._auth.set_custom_user_claims(user_id, custom_claims)
        logger.info(f"Role claim for {user_id} set to {role}")
