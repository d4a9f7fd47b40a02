"""
Print a file with numbered lines.

The file is read in small chunks, re-split into lines and numbered by a chain
of async generators; the result is consumed as a readable stream.

    python examples/async_generator_stream.py mock-data.json
"""
from __future__ import annotations

import asyncio
import logging
import sys

from stream_generators import (
    chunks_to_lines,
    finished,
    number_lines,
    read_chunks,
    streamify,
)


async def main(path: str) -> None:
    stream = streamify(number_lines(chunks_to_lines(read_chunks(path, chunk_size=256))))
    stream.on("data", lambda line: print(line, end=""))
    stream.on("end", lambda: print("\n### DONE ###"))
    await finished(stream)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(f"usage: {sys.argv[0]} FILE", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(sys.argv[1]))
