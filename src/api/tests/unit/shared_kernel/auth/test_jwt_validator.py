"""Unit tests for JWTValidator.

The JWKS discovery endpoints are mocked; tokens are signed with a key
pair generated per test module.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt
from jose.constants import ALGORITHMS

from shared_kernel.auth.jwt_validator import (
    InvalidTokenError,
    JWTValidator,
    TokenClaims,
)
from shared_kernel.auth.observability import JWTValidatorProbe

TEST_ISSUER = "https://auth.example.com/realms/test"
TEST_AUDIENCE = "cohort-api"
TEST_KID = "test-key-id"


@pytest.fixture(scope="module")
def key_pair() -> tuple[str, str]:
    """Generate an RSA key pair as PEM strings."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return private_pem, public_pem


@pytest.fixture(scope="module")
def jwks(key_pair) -> dict[str, Any]:
    """JWKS document publishing the test public key."""
    key = jwk.construct(key_pair[1], ALGORITHMS.RS256).to_dict()
    key.update({"kid": TEST_KID, "use": "sig", "alg": "RS256"})
    return {"keys": [key]}


@pytest.fixture
def make_token(key_pair):
    """Factory for signed test tokens."""

    def _make(
        sub: str | None = "auth0|abc123",
        issuer: str = TEST_ISSUER,
        audience: str = TEST_AUDIENCE,
        exp_delta: timedelta = timedelta(hours=1),
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        now = datetime.now(tz=timezone.utc)
        claims: dict[str, Any] = {
            "iss": issuer,
            "aud": audience,
            "exp": int((now + exp_delta).timestamp()),
            "iat": int(now.timestamp()),
        }
        if sub is not None:
            claims["sub"] = sub
        if extra_claims:
            claims.update(extra_claims)
        return jwt.encode(
            claims,
            key_pair[0],
            algorithm="RS256",
            headers={"kid": TEST_KID, "alg": "RS256"},
        )

    return _make


@pytest.fixture
def openid_config() -> dict[str, Any]:
    return {
        "issuer": TEST_ISSUER,
        "jwks_uri": f"{TEST_ISSUER}/protocol/openid-connect/certs",
    }


@pytest.fixture
def mock_probe() -> MagicMock:
    return MagicMock(spec=JWTValidatorProbe)


@pytest.fixture
def validator(mock_probe) -> JWTValidator:
    return JWTValidator(
        issuer_url=TEST_ISSUER,
        audience=TEST_AUDIENCE,
        probe=mock_probe,
    )


def _response(json_data: dict[str, Any]) -> MagicMock:
    response = MagicMock()
    response.json.return_value = json_data
    response.raise_for_status = MagicMock()
    return response


def _patch_http(*responses: MagicMock):
    """Patch httpx.AsyncClient so successive GETs return ``responses``."""
    patcher = patch("httpx.AsyncClient")
    mock_client_class = patcher.start()
    mock_client = AsyncMock()
    mock_client_class.return_value.__aenter__.return_value = mock_client
    mock_client.get.side_effect = list(responses)
    return patcher, mock_client


class TestTokenClaims:
    def test_holds_provider_user_id(self) -> None:
        claims = TokenClaims(provider_user_id="auth0|abc123")
        assert claims.provider_user_id == "auth0|abc123"


class TestValidateToken:
    """Tests for JWTValidator.validate_token."""

    @pytest.mark.asyncio
    async def test_valid_token_returns_provider_user_id(
        self, validator, mock_probe, make_token, openid_config, jwks
    ) -> None:
        patcher, _ = _patch_http(_response(openid_config), _response(jwks))
        try:
            claims = await validator.validate_token(make_token())
        finally:
            patcher.stop()

        assert claims == TokenClaims(provider_user_id="auth0|abc123")
        mock_probe.token_validated.assert_called_once_with(
            provider_user_id="auth0|abc123"
        )
        mock_probe.jwks_fetched.assert_called_once_with(key_count=1)

    @pytest.mark.asyncio
    async def test_custom_user_id_claim(
        self, mock_probe, make_token, openid_config, jwks
    ) -> None:
        validator = JWTValidator(
            issuer_url=TEST_ISSUER,
            audience=TEST_AUDIENCE,
            probe=mock_probe,
            user_id_claim="uid",
        )
        patcher, _ = _patch_http(_response(openid_config), _response(jwks))
        try:
            claims = await validator.validate_token(
                make_token(extra_claims={"uid": "custom-7"})
            )
        finally:
            patcher.stop()

        assert claims.provider_user_id == "custom-7"

    @pytest.mark.asyncio
    async def test_expired_token_rejected(
        self, validator, mock_probe, make_token, openid_config, jwks
    ) -> None:
        patcher, _ = _patch_http(_response(openid_config), _response(jwks))
        try:
            with pytest.raises(InvalidTokenError, match="expired"):
                await validator.validate_token(
                    make_token(exp_delta=timedelta(hours=-1))
                )
        finally:
            patcher.stop()

        mock_probe.token_validation_failed.assert_called_once_with(
            reason="Token expired"
        )

    @pytest.mark.asyncio
    async def test_wrong_audience_rejected(
        self, validator, make_token, openid_config, jwks
    ) -> None:
        patcher, _ = _patch_http(_response(openid_config), _response(jwks))
        try:
            with pytest.raises(InvalidTokenError):
                await validator.validate_token(make_token(audience="someone-else"))
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_wrong_issuer_rejected(
        self, validator, make_token, openid_config, jwks
    ) -> None:
        patcher, _ = _patch_http(_response(openid_config), _response(jwks))
        try:
            with pytest.raises(InvalidTokenError):
                await validator.validate_token(
                    make_token(issuer="https://evil.example.com")
                )
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_tampered_signature_rejected(
        self, validator, make_token, openid_config, jwks
    ) -> None:
        token = make_token().rsplit(".", 1)[0] + ".invalid_signature"
        patcher, _ = _patch_http(_response(openid_config), _response(jwks))
        try:
            with pytest.raises(InvalidTokenError):
                await validator.validate_token(token)
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_missing_user_id_claim_rejected(
        self, validator, mock_probe, make_token, openid_config, jwks
    ) -> None:
        patcher, _ = _patch_http(_response(openid_config), _response(jwks))
        try:
            with pytest.raises(InvalidTokenError, match="sub"):
                await validator.validate_token(make_token(sub=None))
        finally:
            patcher.stop()

        mock_probe.token_validation_failed.assert_called_once_with(
            reason="Missing sub claim"
        )

    @pytest.mark.asyncio
    async def test_malformed_token_rejected_without_fetching_keys(
        self, validator
    ) -> None:
        with patch("httpx.AsyncClient") as mock_client_class:
            with pytest.raises(InvalidTokenError, match="format"):
                await validator.validate_token("not-a-jwt")

        mock_client_class.assert_not_called()


class TestJWKSCache:
    """Tests for JWKS discovery and caching."""

    @pytest.mark.asyncio
    async def test_keys_fetched_once_within_ttl(
        self, validator, mock_probe, make_token, openid_config, jwks
    ) -> None:
        patcher, mock_client = _patch_http(_response(openid_config), _response(jwks))
        try:
            await validator.validate_token(make_token())
            await validator.validate_token(make_token())
        finally:
            patcher.stop()

        assert mock_client.get.call_count == 2
        mock_probe.jwks_cache_hit.assert_called_once()

    @pytest.mark.asyncio
    async def test_keys_refetched_after_ttl(
        self, mock_probe, make_token, openid_config, jwks
    ) -> None:
        validator = JWTValidator(
            issuer_url=TEST_ISSUER,
            audience=TEST_AUDIENCE,
            probe=mock_probe,
            jwks_cache_ttl=timedelta(minutes=5),
        )
        patcher, mock_client = _patch_http(
            _response(openid_config),
            _response(jwks),
            _response(openid_config),
            _response(jwks),
        )
        try:
            await validator.validate_token(make_token())
            validator._jwks_fetched_at = datetime.now(tz=timezone.utc) - timedelta(
                minutes=10
            )
            await validator.validate_token(make_token())
        finally:
            patcher.stop()

        assert mock_client.get.call_count == 4

    @pytest.mark.asyncio
    async def test_discovery_without_jwks_uri_fails(
        self, validator, mock_probe, make_token
    ) -> None:
        patcher, _ = _patch_http(_response({"issuer": TEST_ISSUER}))
        try:
            with pytest.raises(InvalidTokenError, match="jwks_uri"):
                await validator.validate_token(make_token())
        finally:
            patcher.stop()

        mock_probe.jwks_fetch_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_http_error_becomes_invalid_token(
        self, validator, mock_probe, make_token
    ) -> None:
        patcher, mock_client = _patch_http()
        mock_client.get.side_effect = httpx.ConnectError("connection refused")
        try:
            with pytest.raises(InvalidTokenError, match="Failed to fetch JWKS"):
                await validator.validate_token(make_token())
        finally:
            patcher.stop()

        mock_probe.jwks_fetch_failed.assert_called_once_with(
            error="connection refused"
        )
