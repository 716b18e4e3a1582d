"""Password hashing, token signing and the role policy."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from storefront.errors import ExpiredToken, InvalidSignature, MalformedToken

# bcrypt ignores input past 72 bytes and bcrypt 4.x rejects it outright.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        # Compared against when a username is unknown so login timing stays flat.
        self._dummy_hash = self.hash("storefront-timing-dummy")

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(
            _password_bytes(plaintext), bcrypt.gensalt(rounds=self.rounds)
        ).decode()

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(plaintext), hashed.encode())
        except (ValueError, TypeError):
            return False

    def verify_dummy(self, plaintext: str) -> bool:
        self.verify(plaintext, self._dummy_hash)
        return False


@dataclass(frozen=True)
class Claims:
    subject_id: int
    role: str
    issued_at: datetime
    expires_at: datetime | None = None


class TokenService:
    """Issue and verify HS256 JWTs signed with a server-held secret.

    ``expire_minutes`` of ``None`` or ``0`` issues tokens without an ``exp``
    claim; they then stay valid until the secret changes.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int | None = None,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes or None

    def issue(self, subject_id: int, role: str) -> str:
        now = datetime.now(UTC)
        claims = {"sub": str(subject_id), "role": str(role), "iat": now}
        if self.expire_minutes:
            claims["exp"] = now + timedelta(minutes=self.expire_minutes)
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Claims:
        try:
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedToken(str(exc)) from exc

        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise ExpiredToken(str(exc)) from exc
        except JWTClaimsError as exc:
            raise MalformedToken(str(exc)) from exc
        except JWTError as exc:
            raise InvalidSignature(str(exc)) from exc

        return self._claims_from_payload(payload)

    @staticmethod
    def _claims_from_payload(payload: dict) -> Claims:
        try:
            subject_id = int(payload["sub"])
            role = payload["role"]
            issued_at = datetime.fromtimestamp(payload["iat"], UTC)
            exp = payload.get("exp")
            expires_at = datetime.fromtimestamp(exp, UTC) if exp is not None else None
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedToken(f"Invalid claims: {exc}") from exc
        if not isinstance(role, str):
            raise MalformedToken("Invalid claims: role")
        return Claims(
            subject_id=subject_id,
            role=role,
            issued_at=issued_at,
            expires_at=expires_at,
        )


def is_authorized(claims: Claims, required_roles: Iterable[str]) -> bool:
    """Return True when the verified role is one of ``required_roles``."""
    return claims.role in {str(role) for role in required_roles}
