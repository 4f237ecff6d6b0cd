"""Per-key mutual exclusion for customer workspaces.

Requests for the same customer share one workspace and must not
interleave their writes and sync sessions. Requests for different
customers proceed in parallel.

Example:
>>> locks = KeyedLock()
>>> with locks.hold("acme"):
...     ...  # render and sync the acme workspace

"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses as dc
import threading
import typing as typ


@dc.dataclass(slots=True)
class _Slot:
    lock: threading.Lock = dc.field(default_factory=threading.Lock)
    users: int = 0


class KeyedLock:
    """Arena of locks created on demand and dropped once unused."""

    def __init__(self) -> None:
        """Initialise an empty arena."""
        self._guard = threading.Lock()
        self._slots: dict[str, _Slot] = {}

    def _checkout(self, key: str) -> _Slot:
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = self._slots[key] = _Slot()
            slot.users += 1
            return slot

    def _release(self, key: str, slot: _Slot) -> None:
        with self._guard:
            slot.users -= 1
            if slot.users == 0:
                del self._slots[key]

    @contextlib.contextmanager
    def hold(self, key: str) -> typ.Iterator[None]:
        """Block until ``key`` is free, then hold it for the ``with`` body."""
        slot = self._checkout(key)
        try:
            with slot.lock:
                yield
        finally:
            self._release(key, slot)

    def __len__(self) -> int:
        """Number of keys currently held or waited on."""
        with self._guard:
            return len(self._slots)

    def __contains__(self, key: object) -> bool:
        """Whether ``key`` is currently held or waited on."""
        with self._guard:
            return key in self._slots


@dc.dataclass(slots=True)
class _AsyncSlot:
    lock: asyncio.Lock = dc.field(default_factory=asyncio.Lock)
    users: int = 0


class AsyncKeyedLock:
    """Event-loop counterpart of :class:`KeyedLock`.

    Waiters suspend on an :class:`asyncio.Lock` rather than a worker
    thread, so a burst of requests for one key never occupies the
    executor that requests for other keys need. Use it from a single
    event loop only.
    """

    def __init__(self) -> None:
        """Initialise an empty arena."""
        self._slots: dict[str, _AsyncSlot] = {}

    @contextlib.asynccontextmanager
    async def hold(self, key: str) -> typ.AsyncIterator[None]:
        """Wait until ``key`` is free, then hold it for the ``async with`` body."""
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _AsyncSlot()
        slot.users += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.users -= 1
            if slot.users == 0:
                del self._slots[key]

    def __len__(self) -> int:
        """Number of keys currently held or waited on."""
        return len(self._slots)

    def __contains__(self, key: object) -> bool:
        """Whether ``key`` is currently held or waited on."""
        return key in self._slots


__all__ = ["AsyncKeyedLock", "KeyedLock"]
