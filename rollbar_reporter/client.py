from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional, Union

import httpx

from . import capture
from .builder import ReportBuilder
from .config import ReporterConfig
from .models import Frame, Level, Payload
from .transport import RollbarService, SendResult

logger = logging.getLogger(__name__)


class Client:
    """
    Reports errors and messages for one access token and environment.

    The configuration is read-only after construction, so a single Client can
    be shared between threads and with the automatic failure hook.
    """

    def __init__(self, config: ReporterConfig, *, http_client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self.service = RollbarService(config, http_client=http_client)

    @classmethod
    def create(cls, access_token: str, environment: str, **kwargs: Any) -> "Client":
        http_client = kwargs.pop("http_client", None)
        return cls(ReporterConfig(access_token=access_token, environment=environment, **kwargs), http_client=http_client)

    def __repr__(self) -> str:
        return f"Client(environment={self.config.environment!r}, endpoint={self.config.endpoint!r})"

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def build_report(
        self,
        *,
        level: Optional[Union[Level, str]] = None,
        environment: Optional[str] = None,
        frames: Optional[Iterable[Frame]] = None,
    ) -> ReportBuilder:
        return ReportBuilder(self, level=level, environment=environment, frames=frames)

    def send(self, payload: Payload) -> SendResult:
        """Serialise and deliver a payload. Never raises on delivery failure."""
        try:
            body = payload.to_json()
        except (TypeError, ValueError) as exc:
            logger.warning("Dropping report that could not be serialised: %s", exc)
            return SendResult(ok=False, error=f"serialization failed: {exc}")
        return self.service.send_item(body)

    def report_error(self, error: object, *, level: Optional[Union[Level, str]] = None) -> SendResult:
        if isinstance(error, BaseException) and error.__traceback__ is not None:
            failure = capture.from_error(error)
        else:
            filename, lineno = capture.caller_location(1)
            failure = capture.from_error(error, filename=filename, lineno=lineno)
        return self.build_report(level=level).send(failure)

    def report_error_message(self, text: str, *, level: Optional[Union[Level, str]] = None) -> SendResult:
        filename, lineno = capture.caller_location(1)
        failure = capture.from_error_message(text, filename=filename, lineno=lineno)
        return self.build_report(level=level).send(failure)

    def report_message(self, text: str, *, level: Union[Level, str] = Level.INFO) -> SendResult:
        return self.build_report(level=level).send(text)

    @contextmanager
    def capture_errors(
        self,
        *,
        level: Optional[Union[Level, str]] = None,
        reraise: bool = True,
    ) -> Iterator["Client"]:
        try:
            yield self
        except Exception as exc:
            result = self.report_error(exc, level=level)
            if not result:
                logger.debug("Report for %s was not delivered", type(exc).__name__)
            if reraise:
                raise

    def report_panics(self, **overrides: Any) -> None:
        from .hooks import install

        install(self, **overrides)

    def close(self) -> None:
        self.service.close()
