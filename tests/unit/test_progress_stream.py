"""Tests for the Redis Streams progress client."""

import pytest

from saas_factory.clients.progress_stream import (
    STREAM_TTL_SECONDS,
    ProgressStreamClient,
    stream_key,
)
from saas_factory.schemas import ProgressEvent, ProgressEventType


def event(event_type: ProgressEventType, **kwargs) -> ProgressEvent:
    return ProgressEvent(type=event_type, project_id="p1", **kwargs)


def test_requires_url_or_client():
    with pytest.raises(RuntimeError):
        ProgressStreamClient()


def test_stream_key():
    assert stream_key("abc") == "generation:progress:abc"


@pytest.mark.asyncio
async def test_tail_replays_run_until_complete(progress_stream):
    await progress_stream.publish(event(ProgressEventType.START))
    await progress_stream.publish(
        event(ProgressEventType.STEP_COMPLETE, step_id="analyze", progress=100)
    )
    await progress_stream.publish(event(ProgressEventType.COMPLETE, status="completed"))
    # Never delivered: the stream ends at the first complete
    await progress_stream.publish(event(ProgressEventType.START))

    received = [e async for e in progress_stream.tail("p1", block_ms=10)]

    assert [e.type for e in received] == [
        ProgressEventType.START,
        ProgressEventType.STEP_COMPLETE,
        ProgressEventType.COMPLETE,
    ]
    assert received[1].step_id == "analyze"


@pytest.mark.asyncio
async def test_terminal_event_sets_expiry(progress_stream, fake_redis):
    await progress_stream.publish(event(ProgressEventType.START))
    assert await fake_redis.ttl(stream_key("p1")) == -1

    await progress_stream.publish(event(ProgressEventType.COMPLETE))

    ttl = await fake_redis.ttl(stream_key("p1"))
    assert 0 < ttl <= STREAM_TTL_SECONDS


@pytest.mark.asyncio
async def test_reset_drops_previous_run(progress_stream, fake_redis):
    await progress_stream.publish(event(ProgressEventType.COMPLETE))

    await progress_stream.reset("p1")

    assert await fake_redis.exists(stream_key("p1")) == 0


@pytest.mark.asyncio
async def test_redis_property_requires_connection():
    client = ProgressStreamClient(redis_url="redis://localhost:6379/0")

    with pytest.raises(RuntimeError):
        client.redis


@pytest.mark.asyncio
async def test_tail_skips_events_of_other_runs(progress_stream):
    # A finished earlier run still sits in the stream
    await progress_stream.publish(event(ProgressEventType.START, run_id="old"))
    await progress_stream.publish(event(ProgressEventType.COMPLETE, status="error", run_id="old"))
    await progress_stream.publish(event(ProgressEventType.START, run_id="new"))
    await progress_stream.publish(
        event(ProgressEventType.STEP_PROGRESS, step_id="analyze", progress=0, run_id="new")
    )
    await progress_stream.publish(
        event(ProgressEventType.COMPLETE, status="completed", run_id="new")
    )

    received = [e async for e in progress_stream.tail("p1", run_id="new", block_ms=10)]

    assert [e.type for e in received] == [
        ProgressEventType.START,
        ProgressEventType.STEP_PROGRESS,
        ProgressEventType.COMPLETE,
    ]
    assert {e.run_id for e in received} == {"new"}
    assert received[-1].status == "completed"


@pytest.mark.asyncio
async def test_tail_waits_for_current_run_behind_stale_complete(progress_stream):
    await progress_stream.publish(event(ProgressEventType.COMPLETE, status="error", run_id="old"))

    received = [e async for e in progress_stream.tail("p1", run_id="new", block_ms=10)]

    assert received == []
