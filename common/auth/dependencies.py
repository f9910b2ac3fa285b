"""
Bearer-token dependency factory.

Example:
    from common.auth import JWTAuth, create_auth_dependency

    auth = JWTAuth(secret="dev-secret")
    require_auth = create_auth_dependency(lambda: auth)

    @router.get("/user/data")
    async def get_user_data(claims: Annotated[dict, Depends(require_auth)]):
        return {"user_id": claims["sub"]}
"""

from typing import Any, Callable, Dict, Optional

from fastapi import Header

from common.auth.base import AuthProvider
from common.utils.exceptions import UnauthorizedException

BEARER_PREFIX = "Bearer "


def create_auth_dependency(get_auth_provider: Callable[[], AuthProvider]):
    """
    Build a dependency that verifies the Authorization header.

    The provider is looked up on every request, so it may be swapped after
    the routers are imported.

    Returns:
        Async dependency returning the token claims with ``sub`` set to the
        user ID
    """

    async def get_current_claims(
        authorization: Optional[str] = Header(None),
    ) -> Dict[str, Any]:
        if not authorization:
            raise UnauthorizedException(message="Missing authorization header")

        if not authorization.startswith(BEARER_PREFIX):
            raise UnauthorizedException(
                message="Expected a Bearer token",
                code="INVALID_AUTH_SCHEME",
            )

        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise UnauthorizedException(message="Token is empty", code="INVALID_TOKEN")

        try:
            claims = await get_auth_provider().verify_token(token)
        except ValueError as e:
            raise UnauthorizedException(message=str(e), code="INVALID_TOKEN")

        if not claims.get("sub"):
            raise UnauthorizedException(message="Token missing user ID", code="INVALID_TOKEN")

        return claims

    return get_current_claims
