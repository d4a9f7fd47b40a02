"""
Serve a file over HTTP with numbered lines, streamed through a pipeline.

The response is written with backpressure: the generator chain is only
advanced as fast as the client reads.

    python examples/server_example.py mock-data.json
    curl http://localhost:8000/
"""
from __future__ import annotations

import logging
import sys

from aiohttp import web

from stream_generators import (
    Writable,
    chunks_to_lines,
    number_lines,
    pipeline,
    read_chunks,
    streamify,
)

logger = logging.getLogger(__name__)


class ResponseWritable(Writable):
    """Writes text chunks to an aiohttp streaming response."""

    def __init__(self, response: web.StreamResponse) -> None:
        super().__init__()
        self._response = response

    async def _write(self, chunk: str) -> None:
        await self._response.write(chunk.encode("utf-8"))

    async def _final(self) -> None:
        await self._response.write_eof()


async def handle(request: web.Request) -> web.StreamResponse:
    response = web.StreamResponse(headers={"Content-Type": "text/plain; charset=utf-8"})
    await response.prepare(request)

    source = streamify(number_lines(chunks_to_lines(read_chunks(request.app["path"]))))
    try:
        await pipeline(source, ResponseWritable(response))
    except ConnectionResetError:
        logger.info("Client went away before the response finished")
    return response


def create_app(path: str) -> web.Application:
    app = web.Application()
    app["path"] = path
    app.router.add_get("/", handle)
    return app


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(f"usage: {sys.argv[0]} FILE", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(level=logging.INFO)
    web.run_app(create_app(sys.argv[1]), port=8000)
