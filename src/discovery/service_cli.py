"""
External service manager commands: fire-and-forget start, bounded status query
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Set

from .models import DiscoveryResult
from .output_parser import parse_status_output

logger = logging.getLogger(__name__)

DEFAULT_START_COMMAND = ["foundry", "service", "start"]
DEFAULT_STATUS_COMMAND = ["foundry", "service", "status"]
DEFAULT_STATUS_TIMEOUT = 2.0

class ServiceCLI:
    """Runs the service manager's start and status commands"""

    def __init__(
        self,
        start_command: Optional[Sequence[str]] = None,
        status_command: Optional[Sequence[str]] = None,
        status_timeout: float = DEFAULT_STATUS_TIMEOUT
    ):
        self.start_command: List[str] = list(start_command or DEFAULT_START_COMMAND)
        self.status_command: List[str] = list(status_command or DEFAULT_STATUS_COMMAND)
        self.status_timeout = status_timeout

        # Strong references so pending completion loggers are not collected
        self._background: Set[asyncio.Task] = set()

    async def start_service(self) -> bool:
        """
        Issue the start command without waiting for it to exit.

        The command may only return once the service shuts down again, so
        readiness is observed through status queries, never through this
        process. Its eventual exit is logged from a background task.
        Returns True if the command was spawned.
        """
        logger.info(f"Issuing start command: {' '.join(self.start_command)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *self.start_command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            logger.error(f"Could not run start command {self.start_command[0]}: {e}")
            return False

        task = asyncio.create_task(self._log_start_completion(process))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return True

    async def _log_start_completion(self, process: asyncio.subprocess.Process):
        """Log the start command's output whenever it finally exits"""
        try:
            stdout, stderr = await process.communicate()
        except Exception as e:
            logger.debug(f"Start command output unavailable: {e}")
            return

        if process.returncode:
            logger.info(f"Start command exited with code {process.returncode} (may be normal)")
        if stdout:
            logger.info(f"Start stdout: {stdout.decode('utf-8', errors='replace').strip()}")
        if stderr:
            logger.info(f"Start stderr: {stderr.decode('utf-8', errors='replace').strip()}")

    async def query_status(self) -> DiscoveryResult:
        """Run the status command once, bounded by status_timeout, and parse it"""
        logger.debug("Querying service status from CLI...")
        try:
            process = await asyncio.create_subprocess_exec(
                *self.status_command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            logger.warning(f"Error querying CLI: {e}")
            return DiscoveryResult()

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.status_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Status command timed out after {self.status_timeout}s")
            await self._kill(process)
            return DiscoveryResult()

        output = stdout.decode('utf-8', errors='replace')
        if process.returncode != 0:
            logger.warning(f"Status command exited with code {process.returncode}")
            return DiscoveryResult(raw=output)

        logger.debug(f"CLI response:\n{output}")
        return parse_status_output(output)

    async def _kill(self, process: asyncio.subprocess.Process):
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()

    async def close(self, grace_seconds: float = 0.5):
        """
        Give pending start-command loggers a short grace period, then cancel
        them. The spawned service itself is left running.
        """
        if not self._background:
            return
        _, pending = await asyncio.wait(set(self._background), timeout=grace_seconds)
        for task in pending:
            task.cancel()
        if pending:
            logger.debug(f"Stopped watching {len(pending)} start command(s) still running")
            await asyncio.gather(*pending, return_exceptions=True)
