import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from enterprise_errors.core.fields import read_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestSnapshot:
    """Minimal captured view of an inbound request.

    Only these fields ever reach an error's ``internal`` payload; the live
    request object is never stored.
    """

    data: Any = None
    user: Any = None
    event: str | None = None
    method: str = ""
    url: str = ""
    headers: dict[str, Any] = field(default_factory=dict)

    def as_internal(self) -> dict[str, Any]:
        return {
            "data": self.data,
            "user": self.user,
            "event": self.event,
            "url": self.url,
            "method": self.method,
        }


def _read(obj: Any, name: str) -> Any:
    # Framework request properties may raise when their middleware is not installed
    try:
        return read_field(obj, name)
    except Exception:
        logger.debug("[errors] request field %s unavailable", name, exc_info=True)
        return None


def _first(obj: Any, *names: str) -> Any:
    for name in names:
        value = _read(obj, name)
        if value:
            return value
    return None


def snapshot_request(request: Any) -> RequestSnapshot | None:
    """Extract a RequestSnapshot from a request-like object or mapping.

    Method and URL are looked up on the request itself first, then on a
    nested ``request`` attribute (frameworks that wrap the raw HTTP request).
    """
    if request is None:
        return None
    if isinstance(request, RequestSnapshot):
        return request

    inner = _read(request, "request")
    method = _first(request, "method") or _first(inner, "method") or ""
    url = (
        _first(request, "original_url", "url", "path")
        or _first(inner, "original_url", "url", "path")
        or ""
    )
    headers = _read(request, "headers")
    if headers is None:
        headers = _read(inner, "headers")

    return RequestSnapshot(
        data=_read(request, "data"),
        user=_read(request, "user"),
        event=_read(request, "event"),
        method=str(method),
        url=str(url),
        headers=dict(headers) if isinstance(headers, Mapping) else {},
    )
