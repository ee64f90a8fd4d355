from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .config import ReporterConfig
from .utils import redact_payload

logger = logging.getLogger(__name__)

_REDACTED_KEYS = ("access_token",)


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of one delivery attempt. Truthy when the service accepted the item."""

    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    uuid: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


class RollbarService:
    """Single-attempt HTTP delivery of serialised payloads to the item endpoint."""

    def __init__(self, config: ReporterConfig, http_client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=config.timeout)

    def send_item(self, body: str) -> SendResult:
        if self._client.is_closed:
            result = SendResult(ok=False, error="transport closed")
            self._report_failure(result, body)
            return result

        try:
            response = self._client.post(
                self.config.endpoint,
                # lone surrogates only occur inside JSON strings, where \uXXXX is a valid escape
                content=body.encode("utf-8", "backslashreplace"),
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout,
            )
        except Exception as exc:
            result = SendResult(ok=False, error=f"{type(exc).__name__}: {exc}")
            self._report_failure(result, body)
            return result

        reply = _decode_reply(response)
        if response.is_success:
            uuid = None
            if isinstance(reply.get("result"), dict):
                uuid = reply["result"].get("uuid")
            return SendResult(ok=True, status_code=response.status_code, uuid=uuid)

        message = reply.get("message") or response.reason_phrase or "request rejected"
        result = SendResult(ok=False, status_code=response.status_code, error=str(message))
        self._report_failure(result, body)
        return result

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _report_failure(self, result: SendResult, body: str) -> None:
        logger.warning(
            "Failed to send report to %s (status=%s): %s",
            self.config.endpoint,
            result.status_code,
            result.error,
        )
        if self.config.enable_console_fallback:
            print(f"[rollbar_reporter] failed to send report: {result.error}", file=sys.stderr)
            print(_redact_body(body), file=sys.stderr)


def _decode_reply(response: httpx.Response) -> Dict[str, Any]:
    try:
        reply = response.json()
    except ValueError:
        return {}
    return reply if isinstance(reply, dict) else {}


def _redact_body(body: str) -> str:
    try:
        return json.dumps(redact_payload(json.loads(body), _REDACTED_KEYS), ensure_ascii=False)
    except ValueError:
        return "<unreadable payload>"
