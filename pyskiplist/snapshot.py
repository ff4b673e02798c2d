"""Binary snapshot codec for :class:`~pyskiplist.SkipList`.

A snapshot only stores what is needed to rebuild the list: the format
version, the element count and the values in sorted order. Towers are *not*
persisted; loading re-adds every value so the tower shapes are drawn afresh.

The payload is a *msgpack* map::

    {"version": 1, "count": n, "data": [v0, v1, ...]}

``"data"`` is left out when the list is empty. Values must therefore be
msgpack-serialisable (ints, floats, str, bytes, ...).

On disk the map is prefixed with its length as a big-endian u32, the same
framing used for write-ahead log records.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import msgpack

from .errors import InvalidArgumentError
from .skiplist import SkipList, Snapshot

__all__ = ["dumps", "loads", "dump", "load"]

logger = logging.getLogger(__name__)

_VERSION_KEY = "version"
_COUNT_KEY = "count"
_VALUES_KEY = "data"
_LEN_PREFIX = 4


def dumps(sl: SkipList[Any]) -> bytes:
    """Encode *sl* to msgpack bytes."""
    snap = sl.to_snapshot()
    payload: dict[str, Any] = {_VERSION_KEY: snap.version, _COUNT_KEY: snap.count}
    if snap.values is not None:
        payload[_VALUES_KEY] = snap.values
    blob = msgpack.packb(payload, use_bin_type=True)
    logger.debug("Encoded snapshot of %d values into %d bytes", snap.count, len(blob))
    return blob


def loads(blob: bytes, *, seed: Optional[int] = None) -> SkipList[Any]:
    """Decode bytes produced by :func:`dumps` into a new skip list."""
    try:
        payload = msgpack.unpackb(blob, raw=False)
    except ValueError as exc:  # msgpack unpack errors all derive from ValueError
        raise InvalidArgumentError("snapshot is not valid msgpack") from exc
    if not isinstance(payload, dict) or _VERSION_KEY not in payload or _COUNT_KEY not in payload:
        raise InvalidArgumentError("snapshot header is missing version or count")
    snap = Snapshot(payload[_VERSION_KEY], payload[_COUNT_KEY], payload.get(_VALUES_KEY))
    return SkipList.from_snapshot(snap, seed=seed)


# ---------------------------------------------------------------
# File helpers 💾
# ---------------------------------------------------------------
def dump(sl: SkipList[Any], path: str | Path) -> None:
    """Write a length-prefixed snapshot of *sl* to *path*."""
    blob = dumps(sl)
    with open(path, "wb") as fp:
        fp.write(len(blob).to_bytes(_LEN_PREFIX, "big"))
        fp.write(blob)


def load(path: str | Path, *, seed: Optional[int] = None) -> SkipList[Any]:
    """Read a snapshot written by :func:`dump`."""
    with open(path, "rb") as fp:
        nbytes = fp.read(_LEN_PREFIX)
        if len(nbytes) < _LEN_PREFIX:
            raise InvalidArgumentError(f"{path}: truncated snapshot header")
        length = int.from_bytes(nbytes, "big")
        blob = fp.read(length)
    if len(blob) < length:
        raise InvalidArgumentError(f"{path}: snapshot truncated, expected {length} bytes got {len(blob)}")
    return loads(blob, seed=seed)
