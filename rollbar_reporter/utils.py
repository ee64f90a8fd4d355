from __future__ import annotations

from typing import Any, Iterable, Mapping

REDACTED = "<<redacted>>"


def redact_payload(payload: Any, redact_keys: Iterable[str]) -> Any:
    if not isinstance(payload, Mapping):
        return payload

    redact_set = {key.lower() for key in redact_keys}

    def _redact(value: Any) -> Any:
        if isinstance(value, Mapping):
            return {k: REDACTED if k.lower() in redact_set else _redact(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_redact(item) for item in value]
        return value

    return _redact(payload)
