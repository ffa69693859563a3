"""Exceptions raised while authenticating and dispatching webhook deliveries.

Each carries the HTTP status the webhook gate answers with. The message is
for logs only; responses to GitHub never include it.
"""

from typing import Any, Dict, Optional


class BuildhookError(Exception):
    """Base exception for the webhook service."""

    def __init__(
        self,
        message: str,
        error_code: str = "BUILDHOOK_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(BuildhookError):
    """Required configuration (e.g. the webhook root secret) is missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            status_code=500,
            details=details,
        )


class MalformedRequestError(BuildhookError):
    """Unsigned delivery or a body that does not look like a JSON object."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="MALFORMED_REQUEST",
            status_code=400,
            details=details,
        )


class AuthenticationError(BuildhookError):
    """Signature does not match the one computed for the repository."""

    def __init__(
        self,
        message: str = "Webhook signature mismatch",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_ERROR",
            status_code=400,
            details=details,
        )


class NotRegisteredError(BuildhookError):
    """The snap exists but has no registered store name yet."""

    def __init__(
        self,
        message: str = "Cannot build snap until name is registered",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="NOT_REGISTERED",
            status_code=500,
            details=details,
        )


class ExternalServiceError(BuildhookError):
    """Launchpad or GitHub returned something we could not use."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        error_details["service"] = service

        super().__init__(
            message=f"{service}: {message}",
            error_code="EXTERNAL_SERVICE_ERROR",
            status_code=502,
            details=error_details,
        )


class DispatchError(BuildhookError):
    """Requesting builds for a repository failed; the cause is chained."""

    def __init__(
        self, repository_url: str, details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        error_details["repository_url"] = repository_url

        super().__init__(
            message=f"Failed to request builds of {repository_url}",
            error_code="DISPATCH_ERROR",
            status_code=500,
            details=error_details,
        )
