"""Authentication configuration.

Built once at startup and passed to AuthService explicitly; nothing in the
auth core reads the settings singleton.
"""

from dataclasses import dataclass

from config.settings import Settings
from src.dash_gateway.auth.password import CredentialHasher


@dataclass(frozen=True)
class AuthConfig:
    iterations: int = 210_000
    digest: str = "sha512"
    salt_bytes: int = 16
    key_bytes: int = 64
    min_password_length: int = 6

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(
            iterations=settings.PASSWORD_HASH_ITERATIONS,
            digest=settings.PASSWORD_HASH_DIGEST,
            salt_bytes=settings.PASSWORD_SALT_BYTES,
            key_bytes=settings.PASSWORD_KEY_BYTES,
            min_password_length=settings.PASSWORD_MIN_LENGTH,
        )

    def build_hasher(self) -> CredentialHasher:
        """Raises CredentialConfigError if the parameters are unusable."""
        return CredentialHasher(
            iterations=self.iterations,
            digest=self.digest,
            salt_bytes=self.salt_bytes,
            key_bytes=self.key_bytes,
        )

    def matches(self, hasher: CredentialHasher) -> bool:
        """True if ``hasher`` derives keys with exactly this config's parameters."""
        return (
            hasher.iterations == self.iterations
            and hasher.digest == self.digest
            and hasher.salt_bytes == self.salt_bytes
            and hasher.key_bytes == self.key_bytes
        )
