"""Exceptions raised on misuse of the reporter API.

Nothing here is raised from the send path: delivery failures are returned as
:class:`rollbar_reporter.transport.SendResult` values instead.
"""


class ReporterError(Exception):
    """Base exception for rollbar_reporter errors."""
    pass


class ConfigurationError(ReporterError, ValueError):
    """Raised when a client or report is configured with invalid values."""
    pass


class ReportAlreadyBuiltError(ReporterError, RuntimeError):
    """Raised when a ReportBuilder is asked for a second payload."""

    def __init__(self, message: str = "ReportBuilder has already produced a payload") -> None:
        super().__init__(message)


class UnsupportedReportSourceError(ReporterError, TypeError):
    """Raised when build_payload receives a value it cannot turn into a body."""

    def __init__(self, source: object) -> None:
        super().__init__(f"cannot build a report body from {type(source).__name__}")
        self.source = source
