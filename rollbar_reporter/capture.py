"""Translation of runtime failures into the trace shape of a report.

Two entry points produce the same :class:`FailureInfo` shape:

* :func:`from_error` for error values the caller already holds (an exception
  caught in an ``except`` block, or any other object used as an error).
* :func:`from_exc_info` for the automatic hook, which receives the
  ``(type, value, traceback)`` triple of an uncaught exception. It must never
  raise, because it runs while the process is already failing.

Text is copied as-is into the structured fields. JSON escaping is left to
:meth:`rollbar_reporter.models.Payload.to_json`.
"""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass
from types import TracebackType
from typing import Optional, Tuple, Type

from .models import ExceptionInfo, Frame, TraceBody

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FailureInfo:
    class_name: str
    description: str
    message: str
    frames: Tuple[Frame, ...] = ()

    def to_trace_body(self) -> TraceBody:
        return TraceBody(
            exception=ExceptionInfo(
                class_name=self.class_name,
                description=self.description,
                message=self.message,
            ),
            frames=self.frames,
        )


def _text_of(value: object) -> str:
    try:
        return str(value)
    except Exception:
        try:
            return repr(value)
        except Exception:
            return f"<unprintable {type(value).__name__}>"


def _frames_for(filename: Optional[str], lineno: Optional[int]) -> Tuple[Frame, ...]:
    if filename is None or lineno is None:
        return ()
    return (Frame(filename=filename, lineno=int(lineno)),)


def _innermost_location(tb: Optional[TracebackType]) -> Tuple[Optional[str], Optional[int]]:
    if tb is None:
        return None, None
    entries = traceback.extract_tb(tb)
    if not entries:
        return None, None
    last = entries[-1]
    return last.filename, last.lineno


def caller_location(depth: int = 1) -> Tuple[Optional[str], Optional[int]]:
    """Return (filename, lineno) of the frame ``depth`` levels above the caller."""
    try:
        frame = sys._getframe(depth + 1)
    except (AttributeError, ValueError):
        return None, None
    return frame.f_code.co_filename, frame.f_lineno


def from_error(
    error: object,
    *,
    filename: Optional[str] = None,
    lineno: Optional[int] = None,
) -> FailureInfo:
    """
    Capture a propagated error value.

    Exceptions contribute their class name; any other value is treated as an
    unstructured error and gets an empty class. ``description`` and ``message``
    are both the error's text. An explicit call-site location wins over the
    location recorded in the exception's traceback.
    """
    class_name = type(error).__name__ if isinstance(error, BaseException) else ""
    text = _text_of(error)

    if filename is None or lineno is None:
        if isinstance(error, BaseException):
            filename, lineno = _innermost_location(error.__traceback__)

    return FailureInfo(
        class_name=class_name,
        description=text,
        message=text,
        frames=_frames_for(filename, lineno),
    )


def from_error_message(
    text: str,
    *,
    filename: Optional[str] = None,
    lineno: Optional[int] = None,
) -> FailureInfo:
    """Capture an error that only exists as text, reported at a call site."""
    return FailureInfo(
        class_name="",
        description=text,
        message=text,
        frames=_frames_for(filename, lineno),
    )


def from_exc_info(
    exc_type: Optional[Type[BaseException]],
    exc_value: Optional[BaseException],
    tb: Optional[TracebackType],
) -> FailureInfo:
    """Capture an uncaught failure handed to an exception hook. Never raises."""
    class_name = ""
    text = ""
    try:
        if exc_type is not None:
            class_name = getattr(exc_type, "__name__", "") or ""
        text = _text_of(exc_value) if exc_value is not None else class_name
        if tb is None and exc_value is not None:
            tb = exc_value.__traceback__
        filename, lineno = _innermost_location(tb)
        frames = _frames_for(filename, lineno)
    except Exception:
        logger.debug("Could not read failure location", exc_info=True)
        frames = ()

    return FailureInfo(
        class_name=class_name,
        description=text,
        message=text,
        frames=frames,
    )
