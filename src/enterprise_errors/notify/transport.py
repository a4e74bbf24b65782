import logging

import httpx

from enterprise_errors.notify.email import EmailMessage
from enterprise_errors.settings import EMAIL_TRANSPORT_TIMEOUT

logger = logging.getLogger(__name__)


class HttpEmailTransport:
    """
    Delivers alert emails by posting them as JSON to a mail relay endpoint.

    Pass an instance as ``send_email`` to ``create_email_notifier``. One POST
    per message; failures are logged, never retried.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = EMAIL_TRANSPORT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __call__(self, message: EmailMessage) -> bool:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

        try:
            response = await self._client.post(
                self._url,
                json=message.model_dump(mode="json"),
                headers=self._headers,
            )
        except httpx.RequestError as e:
            logger.warning("[errors] failed to send alert email: %s", e)
            return False

        if response.status_code >= 400:
            logger.warning(
                "[errors] mail relay returned %d: %s",
                response.status_code,
                response.text[:200],
            )
            return False
        return True

    async def close(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
