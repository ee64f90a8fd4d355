"""Process-wide automatic reporting of uncaught exceptions.

:func:`install` replaces ``sys.excepthook`` and ``threading.excepthook`` with a
hook that reports the failure through a Client and then hands it on to the
hook that was active before, so the usual traceback is still printed.

Only one client is active at a time. Installing again swaps the client (the
last install wins) without stacking hooks; :func:`uninstall` restores the
hooks that were in place before the first install.
"""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Any, Callable, Optional, Type, Union

from . import capture
from .models import Level

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Registration:
    client: "Client"
    level: Optional[Union[Level, str]]
    environment: Optional[str]
    previous_excepthook: Callable[..., Any]
    previous_threading_excepthook: Callable[..., Any]


_lock = threading.Lock()
_registration: Optional[_Registration] = None


def install(
    client: "Client",
    *,
    level: Optional[Union[Level, str]] = None,
    environment: Optional[str] = None,
) -> None:
    global _registration

    with _lock:
        if _registration is not None:
            _registration.client = client
            _registration.level = level
            _registration.environment = environment
            logger.debug("Replaced the client of the installed failure hook")
            return

        _registration = _Registration(
            client=client,
            level=level,
            environment=environment,
            previous_excepthook=sys.excepthook,
            previous_threading_excepthook=threading.excepthook,
        )
        sys.excepthook = _excepthook
        threading.excepthook = _threading_excepthook
        logger.debug("Installed failure hook for environment %s", environment or client.config.environment)


def uninstall() -> bool:
    """Restore the hooks saved by install. Returns False when nothing was installed."""
    global _registration

    with _lock:
        if _registration is None:
            return False
        sys.excepthook = _registration.previous_excepthook
        threading.excepthook = _registration.previous_threading_excepthook
        _registration = None
        return True


def is_installed() -> bool:
    return _registration is not None


def installed_client() -> Optional["Client"]:
    registration = _registration
    return registration.client if registration else None


def report_failure(
    exc_type: Optional[Type[BaseException]],
    exc_value: Optional[BaseException],
    tb: Optional[TracebackType],
) -> bool:
    """Report one uncaught failure with the installed client. Never raises."""
    registration = _registration
    if registration is None:
        return False
    try:
        failure = capture.from_exc_info(exc_type, exc_value, tb)
        builder = registration.client.build_report(
            level=registration.level,
            environment=registration.environment,
        )
        return bool(builder.send(failure))
    except Exception:
        logger.exception("Failure hook could not report an uncaught exception")
        return False


def _excepthook(
    exc_type: Type[BaseException],
    exc_value: BaseException,
    tb: Optional[TracebackType],
) -> None:
    registration = _registration
    if not issubclass(exc_type, KeyboardInterrupt):
        report_failure(exc_type, exc_value, tb)
    previous = registration.previous_excepthook if registration else sys.__excepthook__
    previous(exc_type, exc_value, tb)


def _threading_excepthook(args: "threading.ExceptHookArgs") -> None:
    registration = _registration
    if args.exc_type is not SystemExit:
        report_failure(args.exc_type, args.exc_value, args.exc_traceback)
    previous = registration.previous_threading_excepthook if registration else threading.__excepthook__
    previous(args)
