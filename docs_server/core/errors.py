"""Error types raised by the core components."""


class DocsServerError(Exception):
    """Base error for failures surfaced to tool callers."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DocsServerError):
    """Unknown library key, missing file or missing section."""


class ConflictError(DocsServerError):
    """Registry key already present."""


class GatewayError(DocsServerError):
    """Remote content API returned an error or could not be reached."""


class RateLimitExceededError(GatewayError):
    """GitHub answered 403; carries the quota headers when present."""

    def __init__(
        self,
        message: str,
        remaining: str = "unknown",
        reset_at: str = "unknown",
        authenticated: bool = False,
    ):
        super().__init__(
            message,
            status_code=403,
            details={"remaining": remaining, "reset_at": reset_at},
        )
        self.remaining = remaining
        self.reset_at = reset_at
        self.authenticated = authenticated


class DecodeError(DocsServerError):
    """File body was not valid base64."""


__all__ = [
    "DocsServerError",
    "NotFoundError",
    "ConflictError",
    "GatewayError",
    "RateLimitExceededError",
    "DecodeError",
]
