"""Bearer token validation against an OIDC identity provider.

Turns an ``Authorization: Bearer`` token into the opaque provider user id
that the membership context resolves to a local user profile.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Claims extracted from a validated token.

    ``provider_user_id`` is the identity provider's subject for the caller
    (for example ``auth0|5a1b...``). It is opaque to this service.
    """

    provider_user_id: str


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be validated."""

    pass


class JWTValidator:
    """Validates RS256 JWTs using the issuer's published JWKS.

    The JWKS is discovered through ``/.well-known/openid-configuration`` and
    cached for ``jwks_cache_ttl``. Signature, expiry, issuer and audience are
    all verified.
    """

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: JWTValidatorProbe,
        user_id_claim: str = "sub",
        jwks_cache_ttl: timedelta = timedelta(hours=24),
    ):
        """Initialize the validator.

        Args:
            issuer_url: The OIDC issuer URL.
            audience: Expected audience claim value.
            probe: Observability probe for validation events.
            user_id_claim: Claim carrying the provider user id (default: sub).
            jwks_cache_ttl: How long fetched keys are trusted.
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._user_id_claim = user_id_claim
        self._jwks_cache_ttl = jwks_cache_ttl

        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at: datetime | None = None
        self._jwks_lock = asyncio.Lock()

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a token and return the caller's claims.

        Args:
            token: The raw JWT string.

        Returns:
            TokenClaims for the caller.

        Raises:
            InvalidTokenError: If the token is malformed, expired, signed by
                an unknown key, or missing the user id claim.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not header:
            self._probe.token_validation_failed(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        claims = self._decode(token, await self._get_jwks())

        provider_user_id = claims.get(self._user_id_claim)
        if provider_user_id is None:
            self._probe.token_validation_failed(
                reason=f"Missing {self._user_id_claim} claim"
            )
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        self._probe.token_validated(provider_user_id=str(provider_user_id))
        return TokenClaims(provider_user_id=str(provider_user_id))

    def _decode(self, token: str, jwks: dict[str, Any]) -> dict[str, Any]:
        """Verify the token against the key set and return its claims."""
        try:
            return jwt.decode(
                token=token,
                key=jwks,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer_url,
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

    async def _get_jwks(self) -> dict[str, Any]:
        """Return the cached key set, refreshing it once the TTL lapses."""
        if self._is_cache_valid():
            self._probe.jwks_cache_hit()
            return self._jwks  # type: ignore[return-value]

        async with self._jwks_lock:
            # Another request may have refreshed while we waited
            if self._is_cache_valid():
                self._probe.jwks_cache_hit()
                return self._jwks  # type: ignore[return-value]
            return await self._fetch_jwks()

    def _is_cache_valid(self) -> bool:
        if self._jwks is None or self._jwks_fetched_at is None:
            return False
        age = datetime.now(tz=timezone.utc) - self._jwks_fetched_at
        return age < self._jwks_cache_ttl

    async def _fetch_jwks(self) -> dict[str, Any]:
        """Discover and download the issuer's JWKS.

        Raises:
            InvalidTokenError: If discovery or download fails.
        """
        discovery_url = f"{self._issuer_url}/.well-known/openid-configuration"
        try:
            async with httpx.AsyncClient() as client:
                discovery = await client.get(discovery_url)
                discovery.raise_for_status()
                jwks_uri = discovery.json().get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "OIDC provider missing jwks_uri in configuration"
                    )

                response = await client.get(jwks_uri)
                response.raise_for_status()
                jwks = response.json()
        except httpx.HTTPError as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(
                f"Failed to fetch JWKS from OIDC provider: {e}"
            ) from e

        self._jwks = jwks
        self._jwks_fetched_at = datetime.now(tz=timezone.utc)
        self._probe.jwks_fetched(key_count=len(jwks.get("keys", [])))
        return jwks
