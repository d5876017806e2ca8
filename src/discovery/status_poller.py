"""
Status poller: launch the service if needed and wait until it reports running
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .models import StartOutcome
from .service_cli import ServiceCLI

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

class StatusPoller:
    """Bounded retry loop over the status query"""

    def __init__(
        self,
        cli: ServiceCLI,
        max_attempts: int = 60,
        interval_seconds: float = 1.0,
        initial_delay_seconds: float = 2.0,
        progress_log_every: int = 5,
        sleep: Optional[Sleep] = None
    ):
        self.cli = cli
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds
        self.initial_delay_seconds = initial_delay_seconds
        self.progress_log_every = max(1, progress_log_every)
        self.sleep = sleep or asyncio.sleep

    async def start_service(self) -> StartOutcome:
        """
        Check status, launch if not running, then poll until running.

        Budget exhaustion is a soft failure: the outcome says "timeout" and
        the caller is expected to try discovery anyway.
        """
        try:
            logger.info("Checking if service is already running...")
            status = await self.cli.query_status()
            if status.is_running and status.endpoint:
                logger.info(f"[OK] Service is already running on {status.endpoint}")
                return StartOutcome(
                    started=False,
                    was_already_running=True,
                    message=f"Service already running on {status.endpoint}"
                )

            logger.info("Service not running. Starting service via CLI...")
            await self.cli.start_service()

            # A freshly spawned service needs a moment before status means anything
            await self.sleep(self.initial_delay_seconds)

            logger.info("Polling for service availability...")
            for attempt in range(1, self.max_attempts + 1):
                status = await self.cli.query_status()
                if status.is_running and status.endpoint:
                    logger.info(f"[OK] Service started on {status.endpoint} (attempt {attempt})")
                    return StartOutcome(
                        started=True,
                        was_already_running=False,
                        message=f"Service started on {status.endpoint}"
                    )

                if attempt % self.progress_log_every == 0:
                    logger.info(f"Still waiting... ({attempt}/{self.max_attempts})")

                if attempt < self.max_attempts:
                    await self.sleep(self.interval_seconds)

            logger.warning(f"[WARN] Service start timeout after {self.max_attempts} attempts - "
                           f"service may still be starting")
            return StartOutcome(started=False, was_already_running=False, message="timeout")

        except Exception as e:
            logger.error(f"Error while starting service: {e}")
            return StartOutcome(started=False, was_already_running=False, message=f"Error: {e}")
