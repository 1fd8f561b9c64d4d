"""Password hashing: salted PBKDF2-HMAC with constant-time verification.

Stored credential format (one opaque text column, never split on disk):

    <salt hex>:<derived key hex>

The salt is fresh CSPRNG output per enrollment. Its hex text, not the raw
bytes, is the PBKDF2 salt input, and the derived key is compared as hex
text. Records produced by Node's crypto.pbkdf2Sync with the same hex-salt
convention verify unchanged.

Iterations, digest and key length are NOT stored in the record. They are
fixed per deployment and validated once when the hasher is built.
"""

import hashlib
import hmac
import secrets
import string
from dataclasses import dataclass

from src.dash_common.errors import CredentialConfigError, InvalidSecretError

DELIMITER = ":"
MIN_SALT_BYTES = 16
MIN_ITERATIONS = 1_000

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def _is_hex(value: str) -> bool:
    return len(value) % 2 == 0 and all(ch in _HEX_DIGITS for ch in value)


def _encode_secret(value: object) -> bytes:
    """UTF-8 bytes of a secret; lone surrogates and non-str values are rejected."""
    if not isinstance(value, str):
        raise InvalidSecretError("Password must be a non-empty string")
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidSecretError("Password must be valid UTF-8 text") from None


def _require_secret(value: object) -> bytes:
    secret = _encode_secret(value)
    if not secret:
        raise InvalidSecretError("Password must be a non-empty string")
    return secret


@dataclass(frozen=True)
class CredentialHasher:
    """Derives and checks stored credentials.

    Immutable and free of shared state: one instance can serve any number
    of concurrent calls.
    """

    iterations: int = 210_000
    digest: str = "sha512"
    salt_bytes: int = 16
    key_bytes: int = 64

    def __post_init__(self) -> None:
        if self.iterations < MIN_ITERATIONS:
            raise CredentialConfigError(
                f"iterations must be >= {MIN_ITERATIONS}, got {self.iterations}"
            )
        if self.salt_bytes < MIN_SALT_BYTES:
            raise CredentialConfigError(
                f"salt_bytes must be >= {MIN_SALT_BYTES}, got {self.salt_bytes}"
            )
        if self.key_bytes <= 0:
            raise CredentialConfigError(f"key_bytes must be positive, got {self.key_bytes}")
        try:
            hashlib.pbkdf2_hmac(self.digest, b"probe", b"probe", 1, 1)
        except ValueError:
            raise CredentialConfigError(f"unsupported digest {self.digest!r}") from None

    @property
    def _placeholder_salt(self) -> str:
        return "0" * (self.salt_bytes * 2)

    def _derive(self, secret: bytes, salt_hex: str) -> str:
        return hashlib.pbkdf2_hmac(
            self.digest,
            secret,
            salt_hex.encode("ascii"),
            self.iterations,
            self.key_bytes,
        ).hex()

    def hash_password(self, plain: str) -> str:
        """Return a new ``salt:key`` record for ``plain``. Each call draws a new salt."""
        secret = _require_secret(plain)
        salt_hex = secrets.token_hex(self.salt_bytes)
        return f"{salt_hex}{DELIMITER}{self._derive(secret, salt_hex)}"

    def parse(self, hashed: str) -> tuple[str, str] | None:
        """Split a stored record into ``(salt_hex, key_hex)``.

        Returns None for anything malformed: delimiter count other than one,
        non-hex parts, a salt shorter than MIN_SALT_BYTES, or a key whose
        length differs from ``key_bytes``.
        """
        parts = hashed.split(DELIMITER)
        if len(parts) != 2:
            return None
        salt_hex, key_hex = parts
        if len(salt_hex) < MIN_SALT_BYTES * 2 or len(key_hex) != self.key_bytes * 2:
            return None
        if not _is_hex(salt_hex) or not _is_hex(key_hex):
            return None
        return salt_hex, key_hex

    def is_well_formed(self, hashed: str) -> bool:
        return isinstance(hashed, str) and self.parse(hashed) is not None

    def verify_password(self, plain: str, hashed: str) -> bool:
        """Check ``plain`` against a stored record in constant time.

        Malformed records return False after a full derivation, so they cost
        the same as an ordinary mismatch.

        Raises:
            InvalidSecretError: ``plain`` is empty or not UTF-8 encodable, or either
                argument is not a str.
                An empty ``hashed`` is malformed, not invalid input.
        """
        secret = _require_secret(plain)
        if not isinstance(hashed, str):
            raise InvalidSecretError("Stored credential must be a string")

        parsed = self.parse(hashed)
        if parsed is None:
            self._derive(secret, self._placeholder_salt)
            return False

        salt_hex, key_hex = parsed
        candidate = self._derive(secret, salt_hex)
        return hmac.compare_digest(candidate.encode("ascii"), key_hex.encode("ascii"))

    def dummy_verify(self, plain: str) -> bool:
        """Spend one derivation and return False. Used when no record exists.

        Accepts an empty ``plain``; still raises InvalidSecretError for text
        that cannot be UTF-8 encoded.
        """
        self._derive(_encode_secret(plain), self._placeholder_salt)
        return False
