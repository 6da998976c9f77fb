"""Unit tests for JWTAuthProvider.

Covers claim handling on the HS256 path and the Supabase ES256/JWKS path
(key fetch, caching, rotation) with the JWKS endpoint mocked.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://example.supabase.co/auth/v1/.well-known/jwks.json"


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _mock_http_client(response: MagicMock | None = None, error: Exception | None = None) -> AsyncMock:
    client = AsyncMock()
    if error is not None:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


def _jwks_response(keys: list[dict]) -> MagicMock:
    response = MagicMock()
    response.json.return_value = {"keys": keys}
    response.raise_for_status = MagicMock()
    return response


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache before and after every test."""
    jwt_provider_module.reset_jwks_cache()
    yield
    jwt_provider_module.reset_jwks_cache()


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# --- claims ---


class TestValidateTokenClaims:
    async def test_round_trips_created_token(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(id=uuid4(), email="a@example.com", display_name="A")

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result is not None
        assert result.id == user.id
        assert result.email == "a@example.com"
        assert result.display_name == "A"
        assert result.role == "authenticated"

    async def test_email_is_optional(self, hs256_provider: JWTAuthProvider):
        user_id = uuid4()
        token = _make_hs256_token({"sub": str(user_id), "exp": 9999999999})

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.id == user_id
        assert result.email is None

    @pytest.mark.parametrize("sub", [None, "", "not-a-uuid"])
    async def test_rejects_missing_or_non_uuid_subject(self, hs256_provider: JWTAuthProvider, sub):
        payload = {"email": "user@example.com", "exp": 9999999999}
        if sub is not None:
            payload["sub"] = sub

        assert await hs256_provider.validate_token(_make_hs256_token(payload)) is None

    async def test_rejects_wrong_secret(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"sub": str(uuid4()), "exp": 9999999999}, secret="other")

        assert await hs256_provider.validate_token(token) is None

    async def test_rejects_garbage(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not a jwt") is None

    async def test_display_name_from_metadata_fallbacks(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {"sub": str(uuid4()), "exp": 9999999999, "user_metadata": {"full_name": "Full"}}
        )

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.display_name == "Full"


# --- _get_jwks_keys ---


class TestGetJwksKeys:
    async def test_should_return_empty_dict_when_no_supabase_url(self):
        with patch.object(jwt_provider_module, "settings") as mock_settings:
            mock_settings.supabase_jwks_url = ""

            assert await _get_jwks_keys() == {}

    async def test_should_fetch_and_cache_jwks_keys(self):
        client = _mock_http_client(
            _jwks_response(
                [
                    {"kid": "key-1", "kty": "EC", "crv": "P-256", "x": "aa", "y": "bb"},
                    {"kty": "EC", "crv": "P-256", "x": "cc", "y": "dd"},
                ]
            )
        )

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()
            assert list(result) == ["key-1"]

            client.get.reset_mock()
            assert await _get_jwks_keys() == result
            client.get.assert_not_called()

    async def test_should_return_empty_dict_on_http_error(self):
        client = _mock_http_client(error=httpx.ConnectError("Connection refused"))

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            assert await _get_jwks_keys() == {}


# --- _validate_es256 ---


class TestValidateEs256:
    async def test_should_return_none_when_header_has_no_kid(self, hs256_provider: JWTAuthProvider):
        result = await hs256_provider._validate_es256("dummy.token.value", {"alg": "ES256"})

        assert result is None

    async def test_should_refetch_once_then_give_up_on_unknown_kid(
        self, hs256_provider: JWTAuthProvider
    ):
        with patch.object(
            jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
        ) as mock_get_jwks:
            mock_get_jwks.return_value = {"other-kid": {"kty": "EC"}}

            result = await hs256_provider._validate_es256(
                "dummy.token.value", {"alg": "ES256", "kid": "missing-kid"}
            )

            assert result is None
            assert mock_get_jwks.call_count == 2

    async def test_should_decode_with_rotated_key(self, hs256_provider: JWTAuthProvider):
        fake_key_data = {"kid": "rotated-kid", "kty": "EC", "crv": "P-256"}
        fake_payload = {"sub": str(uuid4())}

        with (
            patch.object(
                jwt_provider_module,
                "_get_jwks_keys",
                new_callable=AsyncMock,
                side_effect=[{}, {"rotated-kid": fake_key_data}],
            ),
            patch.object(jwt_provider_module, "ECKey") as mock_eckey_cls,
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_jwt.decode.return_value = fake_payload

            result = await hs256_provider._validate_es256(
                "rotated.token.value", {"alg": "ES256", "kid": "rotated-kid"}
            )

            assert result == fake_payload
            mock_eckey_cls.assert_called_once_with(fake_key_data, algorithm="ES256")
            mock_jwt.decode.assert_called_once_with(
                "rotated.token.value",
                mock_eckey_cls.return_value,
                algorithms=["ES256"],
                options={"verify_aud": False},
            )


class TestValidateTokenEs256Path:
    async def test_should_delegate_to_validate_es256_for_es256_token(
        self, hs256_provider: JWTAuthProvider
    ):
        user_id = str(uuid4())
        fake_payload = {
            "sub": user_id,
            "email": "es256user@example.com",
            "user_metadata": {"display_name": "ES256 User"},
            "role": "authenticated",
        }

        with (
            patch.object(jwt_provider_module.jwt, "get_unverified_header") as mock_header,
            patch.object(hs256_provider, "_validate_es256", new_callable=AsyncMock) as mock_es256,
        ):
            mock_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_es256.return_value = fake_payload

            result = await hs256_provider.validate_token("es256.token.here")

            mock_es256.assert_called_once_with("es256.token.here", {"alg": "ES256", "kid": "k1"})
            assert result is not None
            assert str(result.id) == user_id
            assert result.display_name == "ES256 User"

    async def test_should_return_none_when_es256_validation_returns_none(
        self, hs256_provider: JWTAuthProvider
    ):
        with (
            patch.object(jwt_provider_module.jwt, "get_unverified_header") as mock_header,
            patch.object(hs256_provider, "_validate_es256", new_callable=AsyncMock) as mock_es256,
        ):
            mock_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_es256.return_value = None

            assert await hs256_provider.validate_token("es256.token.here") is None
