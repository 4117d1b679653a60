"""Unit tests for auth/tokens.py -- token issuance, verification, and expiry.

A FakeClock is injected so expiry is tested without sleeping. Issuance and
verification read the same clock, mirroring production where both use
time.time.
"""

import pytest
from jose import jwt

from auth.tokens import Claims, TokenConfig, TokenIssuer
from core.errors import SigningError, TokenExpired, TokenInvalid
from core.identifier import new_id

_KEY = "k" * 32


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def issuer(clock: FakeClock) -> TokenIssuer:
    return TokenIssuer(TokenConfig(secret_key=_KEY, ttl_seconds=300), clock=clock)


class TestIssueAndVerify:
    def test_round_trip_returns_subject(self, issuer: TokenIssuer) -> None:
        subject = new_id()
        claims = issuer.verify(issuer.issue(subject, 60))
        assert claims.subject == str(subject)

    def test_expiry_is_now_plus_ttl(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        claims = issuer.verify(issuer.issue(new_id(), 60))
        assert claims == Claims(subject=claims.subject, expires_at=int(clock.now) + 60)

    def test_default_ttl_comes_from_config(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        claims = issuer.verify(issuer.issue(new_id()))
        assert claims.expires_at == int(clock.now) + 300
        assert issuer.ttl_seconds == 300

    def test_valid_until_exactly_expiry(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        token = issuer.issue(new_id(), 60)
        clock.now += 60
        assert issuer.verify(token).expires_at == int(clock.now)

    def test_expired_after_ttl(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        token = issuer.issue(new_id(), 60)
        clock.now += 61
        with pytest.raises(TokenExpired):
            issuer.verify(token)

    def test_zero_ttl_expires_on_next_second(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        token = issuer.issue(new_id(), 0)
        clock.now += 1
        with pytest.raises(TokenExpired):
            issuer.verify(token)


class TestInvalidTokens:
    def test_other_key_is_rejected(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        other = TokenIssuer(TokenConfig(secret_key="x" * 32, ttl_seconds=300), clock=clock)
        with pytest.raises(TokenInvalid):
            issuer.verify(other.issue(new_id()))

    def test_tampered_payload_is_rejected(self, issuer: TokenIssuer) -> None:
        header, _payload, signature = issuer.issue(new_id()).split(".")
        forged_payload = jwt.encode({"sub": "attacker", "exp": 9_999_999_999}, "x" * 32).split(".")[1]
        with pytest.raises(TokenInvalid):
            issuer.verify(f"{header}.{forged_payload}.{signature}")

    @pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "not.a.token.at.all"])
    def test_malformed_structure(self, issuer: TokenIssuer, garbage: str) -> None:
        with pytest.raises(TokenInvalid):
            issuer.verify(garbage)

    def test_missing_subject(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        token = jwt.encode({"exp": int(clock.now) + 60}, _KEY, algorithm="HS256")
        with pytest.raises(TokenInvalid):
            issuer.verify(token)

    def test_missing_expiry(self, issuer: TokenIssuer) -> None:
        token = jwt.encode({"sub": str(new_id())}, _KEY, algorithm="HS256")
        with pytest.raises(TokenInvalid):
            issuer.verify(token)

    def test_non_integer_expiry(self, issuer: TokenIssuer) -> None:
        token = jwt.encode({"sub": str(new_id()), "exp": "tomorrow"}, _KEY, algorithm="HS256")
        with pytest.raises(TokenInvalid):
            issuer.verify(token)

    def test_unsigned_token_is_rejected(self, issuer: TokenIssuer, clock: FakeClock) -> None:
        header, payload, _sig = issuer.issue(new_id()).split(".")
        with pytest.raises(TokenInvalid):
            issuer.verify(f"{header}.{payload}.")


class TestSigningKey:
    def test_empty_key_cannot_issue(self) -> None:
        issuer = TokenIssuer(TokenConfig(secret_key="", ttl_seconds=60))
        with pytest.raises(SigningError):
            issuer.issue(new_id())

    def test_config_is_immutable(self) -> None:
        config = TokenConfig(secret_key=_KEY, ttl_seconds=60)
        with pytest.raises(AttributeError):
            config.ttl_seconds = 10  # type: ignore[misc]
