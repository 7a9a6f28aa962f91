# relaypanel/adapters/outbound/relay/config_writer.py

import asyncio
import logging
from typing import List

from relaypanel.adapters.outbound.persistence.json_store import atomic_write_text
from relaypanel.application.ports.outbound import IRelayConfigWriter

logger = logging.getLogger(__name__)

GENERATED_HEADER = (
    "# Auto-generated by relay panel",
    "# DO NOT EDIT MANUALLY",
)


def render_secrets_env(proxy_secrets: List[str]) -> str:
    """Render the env file consumed by the relay container."""
    lines = [*GENERATED_HEADER, f"SECRET={','.join(proxy_secrets)}", ""]
    return "\n".join(lines)


class EnvFileRelayConfigWriter(IRelayConfigWriter):
    """
    Writes the relay's SECRET list into an env file, atomically.
    """

    def __init__(self, path: str):
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def write(self, proxy_secrets: List[str]) -> None:
        """
        Replace the artifact with the given relay-level secrets.

        Raises:
            OSError: If the file cannot be written
        """
        content = render_secrets_env(proxy_secrets)
        await asyncio.to_thread(atomic_write_text, self._path, content)
        logger.debug(f"Wrote {len(proxy_secrets)} secrets to {self._path}")
