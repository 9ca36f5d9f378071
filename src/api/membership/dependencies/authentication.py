from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.settings import get_oidc_settings
from membership.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from membership.application.value_objects import Caller
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe

# auto_error=False so a missing header reaches get_caller and is probed
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    Uses lru_cache to ensure a single JWTValidator instance is reused across
    requests, enabling reuse of the instance-level JWKS cache.

    Returns:
        JWTValidator instance configured from OIDC settings.
    """
    settings = get_oidc_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.audience,
        probe=DefaultJWTValidatorProbe(),
        user_id_claim=settings.user_id_claim,
        jwks_cache_ttl=timedelta(seconds=settings.jwks_cache_ttl_seconds),
    )


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()


async def get_caller(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> Caller:
    """Authenticate the request from its bearer token.

    Only proves who the caller is at the identity provider. Resolving the
    caller to a local profile happens inside each operation.

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    if credentials is None:
        auth_probe.authentication_failed(reason="Missing authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = await validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        auth_probe.authentication_failed(reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    auth_probe.caller_authenticated(provider_user_id=claims.provider_user_id)
    return Caller(provider_user_id=claims.provider_user_id)
