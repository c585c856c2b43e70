"""Error taxonomy shared by connectors, pipelines and the CLI."""

from typing import Optional


class LeadMetricsError(Exception):
    """Base class for every error raised by lead_metrics."""


class ConfigurationError(LeadMetricsError):
    """A required configuration value is missing or empty."""

    def __init__(self, missing: list[str] | str):
        if isinstance(missing, str):
            missing = [missing]
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class NetworkError(LeadMetricsError):
    """Transport-level failure talking to the remote source."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Network error: {cause}")


class RemoteApiError(LeadMetricsError):
    """The remote source answered with a non-success status."""

    def __init__(self, status: int, message: str, error_type: Optional[str] = None):
        self.status = status
        self.message = message
        self.error_type = error_type
        super().__init__(f"HTTP {status}: {message}")


class NotFoundError(LeadMetricsError):
    """A lookup matched nothing (department, detail record, table)."""


class MalformedResponseError(LeadMetricsError):
    """A success response body could not be parsed."""
