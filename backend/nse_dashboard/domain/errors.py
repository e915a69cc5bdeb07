from __future__ import annotations


class NseDataError(ValueError):
    """Base error for the NSE snapshot pipeline."""

    code = "NSE_DATA_ERROR"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(self.code)
        self.detail = detail


class UpstreamUnavailableError(NseDataError):
    """Raised when the NSE landing page cannot be reached or answers non-2xx."""

    code = "NSE_UPSTREAM_UNAVAILABLE"

    def __init__(self, *, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(detail)
        self.status_code = status_code


class UpstreamDeadlineExceededError(UpstreamUnavailableError):
    """Raised when the bootstrap and fetch sequence outlives its deadline."""

    code = "NSE_UPSTREAM_DEADLINE_EXCEEDED"

    def __init__(self, *, deadline_seconds: float) -> None:
        super().__init__(detail=f"deadline of {deadline_seconds:g}s exceeded")
        self.deadline_seconds = deadline_seconds


class UpstreamRejectedError(NseDataError):
    """Raised when the NSE data API refuses the request, usually anti-bot detection."""

    code = "NSE_UPSTREAM_REJECTED"

    def __init__(
        self,
        *,
        status_code: int | None = None,
        body: str | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.body = body


class MalformedPayloadError(NseDataError):
    """Raised when an upstream payload does not have the expected structure."""

    code = "NSE_MALFORMED_PAYLOAD"
