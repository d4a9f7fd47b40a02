from .event_emitter import EventEmitter
from .lines import chunks_to_lines, number_lines, read_chunks

__all__ = [
    "EventEmitter",
    "chunks_to_lines",
    "number_lines",
    "read_chunks",
]
