# relaypanel/adapters/outbound/relay/docker_reloader.py

"""
Relay reload through docker compose.

Recreates the relay service so it picks up the regenerated env file.
The command is bounded by a timeout; on expiry the process is killed
and the attempt fails.
"""

import asyncio
import logging
from typing import List, Optional

from relaypanel.application.ports.outbound import IRelayReloader
from relaypanel.domain.exceptions import SyncOperationException

logger = logging.getLogger(__name__)


class DockerComposeReloader(IRelayReloader):
    """
    Reloads the relay with `docker compose up -d --force-recreate <service>`.
    """

    def __init__(
            self,
            compose_file: str,
            project_name: str,
            service_name: str,
            stack_dir: Optional[str] = None,
            timeout: float = 120.0,
            docker_binary: str = "docker",
    ):
        self.compose_file = compose_file
        self.project_name = project_name
        self.service_name = service_name
        self.stack_dir = stack_dir
        self.timeout = timeout
        self.docker_binary = docker_binary

    def build_command(self) -> List[str]:
        return [
            self.docker_binary, "compose",
            "-p", self.project_name,
            "-f", self.compose_file,
            "up", "-d", "--force-recreate", self.service_name,
        ]

    @staticmethod
    def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass

    async def reload(self) -> str:
        """
        Run the reload command.

        Returns:
            Trimmed stdout of the command

        Raises:
            SyncOperationException: If the command cannot start, times out or exits non-zero
        """
        cmd = self.build_command()
        logger.info(f"Reloading relay: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=self.stack_dir or None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise SyncOperationException(detail=f"Failed to start reload command: {e}", original_error=e)

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            self._kill(process)
            await process.wait()
            raise SyncOperationException(detail=f"Relay reload timed out after {self.timeout}s")
        except BaseException:
            # Cancellation included; the child never outlives the attempt
            self._kill(process)
            raise

        out = stdout.decode("utf-8", errors="replace").strip()
        err = stderr.decode("utf-8", errors="replace").strip()

        if process.returncode != 0:
            message = err or out or f"reload command exited with code {process.returncode}"
            raise SyncOperationException(detail=message)

        return out
