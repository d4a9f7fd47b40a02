"""
Tests for pipe(), pipeline() and finished().
"""
from __future__ import annotations

import asyncio

import pytest

from stream_generators import (
    GeneratorStreamOptions,
    PrematureCloseError,
    WritableOptions,
    finished,
    pipeline,
    streamify,
)


async def _agen(items):
    for item in items:
        yield item


# ---------------------------------------------------------------------------
# pipe()
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_pipe_delivers_everything_and_ends_sink(make_source, make_sink):
    source = make_source(range(20))
    stream = streamify(source)
    sink = make_sink()

    assert stream.pipe(sink) is sink
    await asyncio.wait_for(finished(sink), 1)

    assert sink.items == list(range(20))
    assert sink.writable_finished
    assert source.overlaps == 0


@pytest.mark.asyncio
async def test_pipe_respects_sink_backpressure(make_source, make_sink):
    source = make_source(range(30))
    stream = streamify(source, GeneratorStreamOptions(high_water_mark=2))
    outstanding = []
    sink = make_sink(
        WritableOptions(high_water_mark=2),
        delay=0.001,
        on_write=lambda chunk: outstanding.append(source.pulls - len(sink.items)),
    )
    pauses = []
    stream.on("pause", lambda: pauses.append(True))

    stream.pipe(sink)
    await asyncio.wait_for(finished(sink), 2)

    assert sink.items == list(range(30))
    assert pauses
    # Readable buffer + sink queue + one pull in flight
    assert max(outstanding) <= 2 + 2 + 1
    assert source.max_in_flight == 1


@pytest.mark.asyncio
async def test_pipe_emits_pipe_event(make_sink):
    stream = streamify(_agen([1]))
    sink = make_sink()
    sources = []
    sink.on("pipe", sources.append)

    stream.pipe(sink)
    await finished(sink)

    assert sources == [stream]


@pytest.mark.asyncio
async def test_pipe_without_end_leaves_sink_open(make_sink):
    stream = streamify(_agen(["a", "b"]))
    sink = make_sink()

    stream.pipe(sink, end=False)
    await asyncio.wait_for(stream.wait_closed(), 1)
    await asyncio.sleep(0.01)

    assert sink.items == ["a", "b"]
    assert not sink.writable_ended
    sink.end("c")
    await finished(sink)
    assert sink.items == ["a", "b", "c"]


# ---------------------------------------------------------------------------
# pipeline()
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_pipeline_success(make_source, make_sink):
    source = make_source([{"n": 1}, {"n": 2}, {"n": 3}])
    stream = streamify(source)
    sink = make_sink()

    await asyncio.wait_for(pipeline(stream, sink), 1)

    assert sink.items == [{"n": 1}, {"n": 2}, {"n": 3}]
    assert stream.closed
    assert source.closed


@pytest.mark.asyncio
async def test_pipeline_source_failure_destroys_sink(make_source, make_sink):
    error = RuntimeError("producer failed")
    source = make_source(["v1", "v2", "v3"], fail_at=2, error=error)
    stream = streamify(source)
    sink = make_sink()

    with pytest.raises(RuntimeError) as exc_info:
        await asyncio.wait_for(pipeline(stream, sink), 1)

    assert exc_info.value is error
    assert sink.items == ["v1", "v2"]
    assert sink.errored is error
    assert not sink.writable_finished


@pytest.mark.asyncio
async def test_pipeline_sink_failure_closes_source(make_sink):
    cleanup = []

    async def numbers():
        try:
            n = 0
            while True:
                n += 1
                yield n
        finally:
            cleanup.append("closed")

    stream = streamify(numbers())
    sink = make_sink(fail_on=3)

    with pytest.raises(ValueError):
        await asyncio.wait_for(pipeline(stream, sink), 1)

    await asyncio.wait_for(stream.wait_closed(), 1)
    assert sink.items == [1, 2]
    assert stream.destroyed
    assert cleanup == ["closed"]


# ---------------------------------------------------------------------------
# finished()
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_finished_after_readable_end():
    stream = streamify(_agen([1, 2]))
    stream.on("data", lambda item: None)
    await asyncio.wait_for(finished(stream), 1)
    assert stream.readable_ended

    # Already closed: returns immediately
    await finished(stream)


@pytest.mark.asyncio
async def test_finished_raises_premature_close():
    stream = streamify(_agen([1, 2]))
    stream.destroy()
    with pytest.raises(PrematureCloseError):
        await asyncio.wait_for(finished(stream), 1)


@pytest.mark.asyncio
async def test_finished_raises_stored_error_when_already_closed():
    stream = streamify(_agen([1]))
    boom = RuntimeError("boom")
    stream.on("error", lambda exc: None)
    stream.destroy(boom)
    await stream.wait_closed()

    with pytest.raises(RuntimeError) as exc_info:
        await finished(stream)
    assert exc_info.value is boom
