#!/usr/bin/env python3
"""
Trail (position history) buffers for path rendering.

Each body gets a fixed-capacity circular buffer of recent positions. A buffer is
pre-filled with the body's position when it is (re)allocated so that the first
frames don't draw a stray segment from the origin. Reading a buffer linearizes it
from the oldest live sample to the newest, so the drawn path is continuous.

Capacities are configured per body id and may change at runtime; a change
discards that body's history. A length of 0 means no buffer is kept.
"""
from typing import Dict, List, Mapping, Optional, Sequence

from .constants import DEFAULT_TRAIL_LENGTH
from .vector_utils import Vec3


class TrailBuffer:
    """Fixed-capacity ring of 3-vectors with a write cursor."""

    __slots__ = ("_samples", "_cursor")

    def __init__(self, capacity: int, fill: Vec3 = (0.0, 0.0, 0.0)):
        capacity = int(capacity)
        if capacity < 1:
            raise ValueError(f"trail capacity must be >= 1, got {capacity}")
        self._samples: List[Vec3] = [tuple(fill)] * capacity
        self._cursor = 0

    @property
    def capacity(self) -> int:
        return len(self._samples)

    @property
    def cursor(self) -> int:
        """Index of the oldest sample, which the next push overwrites."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._samples)

    def push(self, point: Vec3) -> None:
        """Overwrite the oldest sample with `point`."""
        self._samples[self._cursor] = tuple(point)
        self._cursor = (self._cursor + 1) % len(self._samples)

    def linearize(self) -> List[Vec3]:
        """Samples ordered oldest to newest."""
        c = self._cursor
        return self._samples[c:] + self._samples[:c]


class TrailBank:
    """
    Per-body trail buffers keyed by body id.

    Usage:
        bank = TrailBank()
        bank.record(bodies, {"earth": 2000, "payload": 0})  # once per frame
        paths = bank.paths()  # {id: [oldest, ..., newest]}
    """

    def __init__(self, default_length: int = DEFAULT_TRAIL_LENGTH):
        self.default_length = max(0, int(default_length))
        self._buffers: Dict[str, TrailBuffer] = {}

    def __contains__(self, body_id: str) -> bool:
        return body_id in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def get(self, body_id: str) -> Optional[TrailBuffer]:
        return self._buffers.get(body_id)

    def desired_length(self, body_id: str, lengths: Optional[Mapping[str, int]] = None) -> int:
        if lengths is not None and body_id in lengths:
            return max(0, int(lengths[body_id]))
        return self.default_length

    def sync(self, bodies: Sequence, lengths: Optional[Mapping[str, int]] = None) -> None:
        """
        Make buffer capacities match the configured lengths.

        Buffers whose length changed are reallocated and pre-filled with the body's
        current position; bodies configured to 0 lose their buffer.
        """
        for b in bodies:
            desired = self.desired_length(b.id, lengths)
            buf = self._buffers.get(b.id)
            if desired == 0:
                self._buffers.pop(b.id, None)
            elif buf is None or buf.capacity != desired:
                self._buffers[b.id] = TrailBuffer(desired, b.position)

    def record(self, bodies: Sequence, lengths: Optional[Mapping[str, int]] = None) -> None:
        """Sync capacities, then append every body's current position."""
        self.sync(bodies, lengths)
        for b in bodies:
            buf = self._buffers.get(b.id)
            if buf is not None:
                buf.push(b.position)

    def discard(self, body_id: str) -> None:
        self._buffers.pop(body_id, None)

    def clear(self) -> None:
        self._buffers.clear()

    def paths(self) -> Dict[str, List[Vec3]]:
        return {body_id: buf.linearize() for body_id, buf in self._buffers.items()}
