"""Readiness polling.

Waits for a service inside a running container to accept connections by
repeatedly invoking a probe coroutine.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from ..errors import ReadinessTimeoutError, RuntimeInvocationError

logger = structlog.get_logger(__name__)

DEFAULT_INTERVAL_MS = 1000
DEFAULT_MAX_RETRIES = 30

Probe = Callable[[], Awaitable[bool]]
AttemptCallback = Callable[[int, int, str | None], None]


class ReadinessPoller:
    """Poll a readiness probe with a fixed interval and bounded attempts."""

    def __init__(
        self,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        service_name: str = "Service",
        settings_hint: str | None = None,
    ):
        """Initialize readiness poller.

        Args:
            interval_ms: Milliseconds to wait between attempts.
            max_retries: Maximum number of probe attempts.
            service_name: Display name used in the timeout message.
            settings_hint: Configuration keys that tune interval/retries,
                included in the timeout message.
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if interval_ms < 0:
            raise ValueError("interval_ms must not be negative")
        self.interval_ms = interval_ms
        self.max_retries = max_retries
        self.service_name = service_name
        self.settings_hint = settings_hint

    async def wait_until_ready(
        self,
        probe: Probe,
        on_attempt: AttemptCallback | None = None,
    ) -> int:
        """Invoke ``probe`` until it reports ready.

        A probe raising RuntimeInvocationError counts as "not ready yet".

        Args:
            probe: Zero-argument coroutine function returning True when ready.
            on_attempt: Optional callback called with (attempt, max_retries, error)
                after each unsuccessful attempt.

        Returns:
            Number of attempts used.

        Raises:
            ReadinessTimeoutError: If the probe never reports ready.
        """
        last_error: str | None = None

        for attempt in range(1, self.max_retries + 1):
            try:
                if await probe():
                    logger.debug("service_ready", service=self.service_name, attempt=attempt)
                    return attempt
                last_error = None
            except RuntimeInvocationError as e:
                last_error = e.message

            logger.debug(
                "service_not_ready",
                service=self.service_name,
                attempt=attempt,
                max_retries=self.max_retries,
                error=last_error,
            )
            if on_attempt:
                on_attempt(attempt, self.max_retries, last_error)

            if attempt < self.max_retries:
                await asyncio.sleep(self.interval_ms / 1000)

        message = f"{self.service_name} service took too long to start, please try again"
        if self.settings_hint:
            message += f" (or update `{self.settings_hint}` settings)"
        raise ReadinessTimeoutError(
            message=message,
            attempts=self.max_retries,
            data={"last_error": last_error} if last_error else {},
        )
