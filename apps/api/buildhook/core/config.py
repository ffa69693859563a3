from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The GitHub webhook root secret is deliberately optional at load time.
    A missing secret does not stop the service from starting; it makes
    every webhook delivery fail with a 500 until it is configured.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # GitHub: the root secret every per-repository webhook secret is
    # derived from. Never log it.
    github_webhook_secret: str = ""
    github_api_url: str = "https://api.github.com"
    github_auth_token: str = ""

    # Launchpad: snap lookup and build requests.
    launchpad_api_url: str = "https://api.launchpad.net/devel"
    launchpad_consumer_key: str = "snapbuild"
    launchpad_access_token: str = ""
    launchpad_access_secret: str = ""
    # Only snaps owned by this Launchpad account are considered.
    launchpad_username: str = ""

    # Redis: holds cached snapcraft.yaml data per repository.
    redis_url: str = "redis://localhost:6379/0"
    snapcraft_yaml_cache_ttl: int = 3600

    # Outbound HTTP
    http_timeout: float = 10.0

    # Sentry: leave blank to disable error capture.
    sentry_dsn: str = ""

    # App
    debug: bool = True

    def get(self, key: str) -> Optional[str]:
        """Look up a setting by its environment-style name.

        Returns None when the field is unknown or set to an empty value, so
        callers can treat "unset" and "blank" the same way.
        """
        value = getattr(self, key.lower(), None)
        if value is None or value == "":
            return None
        return str(value)


def get_settings() -> Settings:
    return Settings()
