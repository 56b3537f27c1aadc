# WARNING: This settings loader is for LOCAL DEVELOPMENT ONLY.
# Never commit your .env file or share your client credentials.
# Ensure .env is listed in .gitignore!

"""Settings loader for metadata service credentials.

Loads the client id/tag and the service endpoint from environment variables
(prefixed ``MEDIAXID_``) or a .env file.

Keys:
- MEDIAXID_CLIENT_ID (required for live lookups)
- MEDIAXID_CLIENT_TAG (optional)
- MEDIAXID_SERVICE_URL (optional, defaults to the public gateway)
- MEDIAXID_TIMEOUT_S (optional, seconds per request)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE_URL = "https://metadata.example.com/v1"


class MissingCredentialError(Exception):
    """Raised when a required credential is missing from the environment or .env."""

    def __init__(self, key: str) -> None:
        """Initialize the error with the missing key name."""
        super().__init__(
            f"Missing required credential: MEDIAXID_{key}\n"
            "Set it in the environment or in a .env file."
        )
        self.key = key


class Settings(BaseSettings):
    """Settings for the metadata service connection."""

    CLIENT_ID: str | None = None
    CLIENT_TAG: str | None = None
    SERVICE_URL: str = DEFAULT_SERVICE_URL
    TIMEOUT_S: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="MEDIAXID_", env_file=".env", extra="ignore"
    )

    def require_keys(self) -> None:
        """Raise MissingCredentialError if any required key is missing."""
        required = ["CLIENT_ID"]
        for key in required:
            if not getattr(self, key, None):
                raise MissingCredentialError(key)
