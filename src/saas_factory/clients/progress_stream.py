"""Redis Streams fan-out of generation progress.

The orchestrator appends events to `generation:progress:<project_id>`; stream
endpoints tail the same key with XREAD.
"""

from collections.abc import AsyncIterator
import json

import redis.asyncio as redis

from ..logging import get_logger
from ..schemas.progress import ProgressEvent

logger = get_logger(__name__)

STREAM_PREFIX = "generation:progress:"
# Finished runs stay readable for late subscribers for this long
STREAM_TTL_SECONDS = 3600
STREAM_MAXLEN = 1000


def stream_key(project_id: str) -> str:
    return f"{STREAM_PREFIX}{project_id}"


class ProgressStreamClient:
    """Publishes and tails progress events on Redis Streams."""

    def __init__(self, redis_url: str | None = None, client: redis.Redis | None = None):
        if redis_url is None and client is None:
            raise RuntimeError("Redis URL not provided. Pass redis_url or set REDIS_URL.")
        self.redis_url = redis_url
        self._redis = client

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url, decode_responses=True)
            logger.info("redis_connected", redis_url=self.redis_url)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("redis_connection_closed")

    @property
    def redis(self) -> redis.Redis:
        if self._redis is None:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._redis

    async def reset(self, project_id: str) -> None:
        """Drop events of a previous run before a new one starts."""
        await self.redis.delete(stream_key(project_id))

    async def publish(self, event: ProgressEvent) -> str:
        key = stream_key(event.project_id)
        message_id = await self.redis.xadd(
            key, {"data": event.model_dump_json(exclude_none=True)}, maxlen=STREAM_MAXLEN
        )
        if event.is_terminal:
            await self.redis.expire(key, STREAM_TTL_SECONDS)
        logger.debug("progress_published", stream=key, message_id=message_id, type=event.type)
        return message_id

    async def tail(
        self,
        project_id: str,
        run_id: str | None = None,
        block_ms: int = 15000,
        last_id: str = "0",
    ) -> AsyncIterator[ProgressEvent]:
        """Yield events of one run until its `complete`.

        With `run_id` set, events left over from other runs are skipped. Ends
        quietly when no event arrives within `block_ms`.
        """
        key = stream_key(project_id)
        while True:
            response = await self.redis.xread({key: last_id}, block=block_ms, count=10)
            if not response:
                logger.info("progress_stream_idle", stream=key, block_ms=block_ms)
                return
            for _stream, messages in response:
                for message_id, fields in messages:
                    last_id = message_id
                    event = ProgressEvent.model_validate(json.loads(fields["data"]))
                    if run_id is not None and event.run_id != run_id:
                        logger.debug("progress_event_skipped", stream=key, run_id=event.run_id)
                        continue
                    yield event
                    if event.is_terminal:
                        return
