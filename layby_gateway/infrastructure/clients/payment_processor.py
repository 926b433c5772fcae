"""Payment processor webhook client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from typing import Dict, Any
from layby_gateway.config import settings
from layby_gateway.domain.exceptions import PaymentProcessorError
from layby_gateway.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class PaymentProcessorClient:
    """Client handing booking schedules to the payment processor for charging"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.payment_webhook_url
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    async def send_booking_event(self, payload: Dict[str, Any]) -> None:
        """
        Send booking confirmation (initial charge + recurring schedule) to the processor.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s, 16s (base^attempt)
        - Retries on 5xx errors and network failures, 4xx fails immediately
        - Tracks latency histogram and failure counter

        Raises:
            PaymentProcessorError: When the event could not be delivered
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except httpx.HTTPStatusError as e:
                    webhook_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise PaymentProcessorError(
                            f"Payment processor rejected event: {e.response.status_code}"
                        ) from e
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise PaymentProcessorError(
                            f"Payment processor error after {attempt} attempts: {e.response.status_code}"
                        ) from e

                except httpx.RequestError as e:
                    webhook_failure_counter.inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise PaymentProcessorError(f"Payment processor unreachable: {e}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logging.warning(
                    f"Payment webhook attempt {attempt} failed, retrying in {backoff}s",
                    extra={"event": payload.get("event")},
                )
                await asyncio.sleep(backoff)
