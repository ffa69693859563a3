"""Per-repository webhook secrets.

Every repository gets its own webhook secret, derived from a single root
secret so nothing per-repository has to be stored:

    secret = hex(HMAC-SHA1(root_secret, owner || name))

The root secret comes from configuration (GITHUB_WEBHOOK_SECRET). Neither
it nor any derived secret may appear in logs or responses.
"""

import hashlib
import hmac
from typing import Optional, Protocol

from buildhook.core.exceptions import ConfigurationError

ROOT_SECRET_KEY = "GITHUB_WEBHOOK_SECRET"


class ConfigSource(Protocol):
    """Anything that can answer `get(key)`; `Settings` is the real one."""

    def get(self, key: str) -> Optional[str]:
        ...


def derive_webhook_secret(root_secret: str, owner: str, name: str) -> str:
    """Derive the webhook secret for one repository.

    `owner` and `name` are fed to the HMAC as two separate updates.
    """
    if not root_secret:
        raise ConfigurationError("GitHub webhook secret not configured")

    mac = hmac.new(root_secret.encode("utf-8"), digestmod=hashlib.sha1)
    mac.update(owner.encode("utf-8"))
    mac.update(name.encode("utf-8"))
    return mac.hexdigest()


class SecretDeriver:
    """Derives repository secrets from the configured root secret."""

    def __init__(self, config: ConfigSource):
        self._config = config

    def derive(self, owner: str, name: str) -> str:
        """Return the webhook secret for `owner/name`.

        Raises:
            ConfigurationError: The root secret is missing or blank.
        """
        root_secret = self._config.get(ROOT_SECRET_KEY)
        if not root_secret:
            raise ConfigurationError("GitHub webhook secret not configured")
        return derive_webhook_secret(root_secret, owner, name)
