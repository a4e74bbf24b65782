from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

from enterprise_errors.core.error import ErrorResponse, StructuredError
from enterprise_errors.core.normalize import normalize_error
from enterprise_errors.core.request import RequestSnapshot, snapshot_request
from enterprise_errors.persistence.error_log import log_error
from enterprise_errors.settings import UNKNOWN_ERR

if TYPE_CHECKING:
    from enterprise_errors.notify.email import Notifier
    from enterprise_errors.persistence.base import Persistence

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]
ReportHook = Callable[[Any, ErrorResponse], Any]
SnapshotFn = Callable[[Any], RequestSnapshot | None]


def report_to_request(request: Any, response: ErrorResponse) -> Any:
    """Default report hook: hand the response to ``request.error``."""
    return request.error(response)


def handle_errors(
    fn: Handler | None = None,
    *,
    notify: Notifier | None = None,
    persistence: Persistence | None = None,
    table_name: str | None = None,
    module: str | None = None,
    env: str = "",
    report: ReportHook | None = None,
    snapshot: SnapshotFn = snapshot_request,
    frame_markers: Iterable[str] = (),
    log: logging.Logger | None = None,
) -> Any:
    """Wrap a single-argument async handler with classify/persist/notify/report.

    Usable directly, ``handle_errors(handler, module="billing")``, or as a
    decorator factory, ``@handle_errors(module="billing")``.

    On success the handler's return value passes through untouched. On an
    exception the wrapped handler:

    1. normalizes it with ``normalize_error``;
    2. writes it through ``persistence`` when both it and ``table_name`` are set;
    3. awaits ``notify(env, error)`` when a notifier is set;
    4. calls ``report(request, error.to_response())`` exactly once and returns
       its result.

    Persistence and notifier failures are logged and swallowed. The original
    exception is never re-raised; an exception raised by the report hook
    itself does propagate, since raising is how some frameworks signal errors.
    """
    options = {
        "notify": notify,
        "persistence": persistence,
        "table_name": table_name,
        "module": module,
        "env": env,
        "report": report,
        "snapshot": snapshot,
        "frame_markers": frame_markers,
        "log": log,
    }
    if fn is None:
        return functools.partial(handle_errors, **options)

    log = log or logger
    report_hook = report or report_to_request
    markers = tuple(frame_markers)

    @functools.wraps(fn)
    async def wrapper(request: Any) -> Any:
        try:
            return await fn(request)
        except Exception as exc:
            try:
                context = snapshot(request)
            except Exception:
                log.warning("[errors] could not snapshot request for %s", getattr(fn, "__qualname__", fn), exc_info=True)
                context = None

            try:
                error = normalize_error(exc, module, context, frame_markers=markers)
            except Exception:
                log.error("[errors] could not classify %r", exc, exc_info=True)
                error = StructuredError(
                    "Unknown failure",
                    code=UNKNOWN_ERR,
                    module=module,
                    internal=exc,
                    request=context,
                    frame_markers=markers,
                )

            log.log(
                logging.ERROR if error.status >= 500 else logging.WARNING,
                "[errors] %s failed with %s (%s): %s",
                getattr(fn, "__qualname__", fn),
                error.code,
                error.status,
                error.message,
            )

            if persistence is not None and table_name:
                await log_error(error, persistence, table_name, log=log)

            if notify is not None:
                try:
                    await notify(env, error)
                except Exception as notify_exc:
                    log.error("[errors] failed to send alert for %s: %s", error.code, notify_exc, exc_info=True)

            result = report_hook(request, error.to_response())
            if inspect.isawaitable(result):
                result = await result
            return result

    return wrapper
