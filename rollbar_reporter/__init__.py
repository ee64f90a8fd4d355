from .builder import ReportBuilder
from .capture import FailureInfo
from .client import Client
from .config import ReporterConfig
from .exceptions import (
    ConfigurationError,
    ReportAlreadyBuiltError,
    ReporterError,
    UnsupportedReportSourceError,
)
from .fastapi_integration import ErrorReportingMiddleware, setup_error_reporting
from .hooks import install, installed_client, uninstall
from .models import Frame, Level, MessageBody, Payload, TraceBody
from .transport import SendResult

__all__ = [
    "Client",
    "ReporterConfig",
    "ReportBuilder",
    "Payload",
    "TraceBody",
    "MessageBody",
    "Frame",
    "Level",
    "FailureInfo",
    "SendResult",
    "install",
    "uninstall",
    "installed_client",
    "ErrorReportingMiddleware",
    "setup_error_reporting",
    "ReporterError",
    "ConfigurationError",
    "ReportAlreadyBuiltError",
    "UnsupportedReportSourceError",
]
