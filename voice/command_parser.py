# voice/command_parser.py

import asyncio
import logging
from typing import Optional

import aiohttp

from config import Config
from routines.messages import ParseUtterance
from routines.models import IntentContext

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# answers that mean "the interpreter did not understand this", not a failure
_NOT_PARSED_STATUSES = (404, 422)


class CommandParser:
    """
    Sends single utterances to the extension's interpreter and returns the
    structured IntentContext, or None when the text does not parse.

    Routine authoring is strict: requests always disable the fallback handler.
    Network errors are not "did not parse" and are raised to the caller.
    """

    def __init__(self,
                 base_url: str,
                 endpoint: str = "/message",
                 timeout: float = 10.0,
                 max_retries: int = 3,
                 backoff_factor: float = 1.0):
        self.url = base_url.rstrip('/') + endpoint
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls) -> "CommandParser":
        config = Config.get_config()
        http = config.get("http", {})
        return cls(
            config["host"]["url"],
            endpoint=config["messages"]["endpoint"],
            timeout=http.get("timeout", 10.0),
            max_retries=http.get("max_retries", 3),
            backoff_factor=http.get("backoff_factor", 1.0),
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None

    def _session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self.session

    async def _post_message(self, payload: dict):
        """POST a message, retrying connection problems. Returns the JSON body or None."""
        delay = self.backoff_factor
        attempts = max(1, self.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                async with self._session().post(self.url, json=payload) as resp:
                    if resp.status in _NOT_PARSED_STATUSES:
                        return None
                    resp.raise_for_status()
                    return await resp.json(content_type=None)
            except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
                logger.warning("Parse request to %s failed (attempt %d/%d): %s",
                               self.url, attempt, attempts, e)
                if attempt == attempts:
                    logger.error("Max retries reached for %s", self.url)
                    raise
                await asyncio.sleep(delay)
                delay *= 2
            except aiohttp.ClientResponseError as e:
                logger.error("Interpreter returned HTTP %d for %s: %s", e.status, self.url, e)
                raise

    async def parse(self, utterance: str) -> Optional[IntentContext]:
        request = ParseUtterance(utterance=utterance)
        logger.debug("Parsing %r via %s", utterance, self.url)
        data = await self._post_message(request.to_payload())
        if not isinstance(data, dict):
            logger.info("Not parsed: %r", utterance)
            return None
        return IntentContext.from_dict(data)
