"""Error taxonomy shared by the analyzer, collaborators and API layer.

Only ValidationError and UpstreamFetchError carry messages meant for the
caller; everything else is reported as a generic 500.
"""


class SeoAnalyzerError(Exception):
    """Base class for all application errors."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(SeoAnalyzerError):
    """Bad or missing input supplied by the caller."""

    status_code = 400
    public_message = "Invalid request"


class MalformedInputError(ValidationError):
    """Raised by the extractor when the input is not markup at all."""

    public_message = "Document could not be parsed as HTML"


class UpstreamFetchError(SeoAnalyzerError):
    """Target site unreachable or returned a non-2xx status."""

    status_code = 400
    public_message = "Failed to fetch URL"

    TIMEOUT = "timeout"
    DNS = "dns"
    HTTP_STATUS = "http-status"
    REFUSED = "refused"
    PROTOCOL = "protocol"

    def __init__(self, reason: str, message: str = "", status: int | None = None) -> None:
        super().__init__(message or f"{self.public_message}: {reason}")
        self.reason = reason
        self.status = status


class UpstreamModelError(SeoAnalyzerError):
    """Suggestion model call failed. Always recovered with a fallback."""


class PersistenceError(SeoAnalyzerError):
    """Result store failure."""

    public_message = "Failed to save analysis"
