"""Order webhook client with exponential backoff retry logic"""

import asyncio
import logging
import httpx
from typing import Any, Dict
from pix_checkout.config import settings
from pix_checkout.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter

logger = logging.getLogger(__name__)


class OrderWebhookClient:
    """Notifies the ordering platform about issued PIX charges"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = settings.order_webhook_url if webhook_url is None else webhook_url
        self.max_retries = settings.webhook_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.webhook_backoff_base if backoff_base is None else backoff_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_charge_event(self, payload: Dict[str, Any]) -> None:
        """
        POST a charge event, retrying on failure.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base... (base * 2^(attempt-1))
        - Retries on HTTP status errors and network failures
        - Re-raises the last error once max_retries attempts have failed
        - Always makes at least one attempt, even with max_retries=0
        """
        if not self.enabled:
            logger.debug("Order webhook disabled, dropping %s", payload.get("event"))
            return

        max_attempts = max(self.max_retries, 1)
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while attempt < max_attempts:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()
                    logger.warning(
                        f"Order webhook attempt {attempt} failed: {e}",
                        extra={"event": payload.get("event"), "attempt": attempt},
                    )

                    if attempt >= max_attempts:
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
