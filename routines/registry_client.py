# routines/registry_client.py

import asyncio
import logging
from typing import Dict, Optional

import httpx

from config import Config
from routines.errors import RegistryProtocolError
from routines.messages import GetRegisteredNicknames, Message, RegisterNickname
from routines.models import RoutineDefinition

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class RegistryClient:
    """
    Request/response wrapper around the remote routine registry.

    Reads are retried with back-off on network errors. Writes are sent
    exactly once: the registry applies each write atomically per key and a
    blind retry could replay a write the store already took.
    """

    def __init__(self,
                 base_url: str,
                 endpoint: str = "/message",
                 timeout: float = 10.0,
                 max_retries: int = 3,
                 backoff_factor: float = 1.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = base_url.rstrip("/") + endpoint
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.transport = transport

    @classmethod
    def from_config(cls) -> "RegistryClient":
        config = Config.get_config()
        http = config.get("http", {})
        return cls(
            config["host"]["url"],
            endpoint=config["messages"]["endpoint"],
            timeout=http.get("timeout", 10.0),
            max_retries=http.get("max_retries", 3),
            backoff_factor=http.get("backoff_factor", 1.0),
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _send(self, message: Message, retries: int = 1) -> httpx.Response:
        payload = message.to_payload()
        logger.debug("Sending %s to %s: %r", message.type, self.url, payload)
        delay = self.backoff_factor
        retries = max(1, retries)
        for attempt in range(1, retries + 1):
            try:
                async with self._client() as client:
                    resp = await client.post(self.url, json=payload)
                    resp.raise_for_status()
                    return resp
            except (httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError) as e:
                logger.warning("Registry request %s failed (attempt %d/%d): %s",
                               message.type, attempt, retries, e)
                if attempt == retries:
                    logger.error("Giving up on %s to %s", message.type, self.url)
                    raise
                await asyncio.sleep(delay)
                delay *= 2
            except httpx.HTTPStatusError as e:
                # 4xx/5xx – won't succeed on retry
                logger.error("Registry returned HTTP %d for %s: %s",
                             e.response.status_code, message.type, e)
                raise

    async def fetch_all(self) -> Dict[str, RoutineDefinition]:
        """Full snapshot of the registry, keyed by routine name."""
        resp = await self._send(GetRegisteredNicknames(), retries=self.max_retries)
        data = resp.json() if resp.content else {}
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RegistryProtocolError(
                f"expected a mapping of routines, got {type(data).__name__}")
        routines = {}
        for name, entry in data.items():
            # a null entry is a deleted routine the store has not compacted yet
            if entry is None:
                continue
            if not isinstance(entry, dict):
                raise RegistryProtocolError(f"routine {name!r} is not an object")
            routines[name] = RoutineDefinition.from_dict(entry, name=name)
        return routines

    async def upsert(self, name: str, definition: RoutineDefinition) -> None:
        await self._send(RegisterNickname(name=name, context=definition))
        logger.info("Registered routine %r (%d actions)", name, len(definition.contexts))

    async def remove(self, name: str) -> None:
        await self._send(RegisterNickname(name=name, context=None))
        logger.info("Removed routine %r", name)
