from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Iterable, Optional, Tuple, Union

from . import capture
from .capture import FailureInfo
from .exceptions import ConfigurationError, ReportAlreadyBuiltError, UnsupportedReportSourceError
from .models import Body, Frame, Level, MessageBody, Payload, TraceBody

if TYPE_CHECKING:
    from .client import Client
    from .transport import SendResult

ReportSource = Union[str, BaseException, FailureInfo]


class ReportBuilder:
    """
    Single-use report configuration bound to a Client.

    Overrides are fixed when the builder is created (see Client.build_report).
    Exactly one terminal call, build_payload or send, is allowed per builder.
    """

    def __init__(
        self,
        client: "Client",
        *,
        level: Optional[Union[Level, str]] = None,
        environment: Optional[str] = None,
        frames: Optional[Iterable[Frame]] = None,
    ) -> None:
        if environment is not None and (not isinstance(environment, str) or not environment.strip()):
            raise ConfigurationError("environment override must be a non-empty string")
        self.client = client
        self.level = Level.parse(level) if level is not None else client.config.default_level
        self.environment = environment or client.config.environment
        self.frames: Optional[Tuple[Frame, ...]] = tuple(frames) if frames is not None else None
        self._consumed = False
        self._lock = threading.Lock()

    @property
    def consumed(self) -> bool:
        return self._consumed

    def build_payload(self, source: ReportSource) -> Payload:
        self._consume()
        return Payload(
            access_token=self.client.config.access_token,
            environment=self.environment,
            level=self.level,
            body=self._body_for(source),
        )

    def send(self, source: ReportSource) -> "SendResult":
        return self.client.send(self.build_payload(source))

    def _consume(self) -> None:
        with self._lock:
            if self._consumed:
                raise ReportAlreadyBuiltError()
            self._consumed = True

    def _body_for(self, source: ReportSource) -> Body:
        if isinstance(source, str):
            return MessageBody(body=source)
        if source is None or isinstance(source, (bytes, bytearray)):
            raise UnsupportedReportSourceError(source)
        failure = source if isinstance(source, FailureInfo) else capture.from_error(source)

        body = failure.to_trace_body()
        if self.frames is not None:
            body = TraceBody(exception=body.exception, frames=self.frames)
        return body
