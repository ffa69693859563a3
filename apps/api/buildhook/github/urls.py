"""Repository URL and cache-key helpers shared by the webhook and build code."""

GITHUB_WEB_BASE = "https://github.com"


def repository_url(owner: str, name: str) -> str:
    return f"{GITHUB_WEB_BASE}/{owner}/{name}"


def snapcraft_yaml_cache_id(repository_url: str) -> str:
    """Redis key under which a repository's parsed snapcraft.yaml is cached."""
    return f"snapcraft_data:{repository_url}"
