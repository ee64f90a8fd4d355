from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple, Union

LANGUAGE = "python"


class Level(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: Union["Level", str]) -> "Level":
        """Lenient conversion: unknown names fall back to ERROR."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.ERROR

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Frame:
    filename: str
    lineno: int

    def to_payload(self) -> Dict[str, Any]:
        return {"filename": self.filename, "lineno": self.lineno}


@dataclass(frozen=True, slots=True)
class ExceptionInfo:
    class_name: str
    description: str
    message: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "class": self.class_name,
            "description": self.description,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class TraceBody:
    exception: ExceptionInfo
    frames: Tuple[Frame, ...] = ()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "trace": {
                "exception": self.exception.to_payload(),
                "frames": [frame.to_payload() for frame in self.frames],
            }
        }


@dataclass(frozen=True, slots=True)
class MessageBody:
    body: str

    def to_payload(self) -> Dict[str, Any]:
        return {"message": {"body": self.body}}


Body = Union[TraceBody, MessageBody]


@dataclass(frozen=True, slots=True)
class Payload:
    access_token: str = field(repr=False)
    environment: str
    level: Level
    body: Body
    language: str = LANGUAGE

    @property
    def is_trace(self) -> bool:
        return isinstance(self.body, TraceBody)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "data": {
                "environment": self.environment,
                "level": str(self.level),
                "language": self.language,
                "body": self.body.to_payload(),
            },
        }

    def to_json(self) -> str:
        # Escaping of non-ASCII and control characters happens here, not at capture time.
        return json.dumps(self.to_payload(), ensure_ascii=False)
