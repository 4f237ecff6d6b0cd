"""Typed structures for incoming monitoring records."""

from __future__ import annotations

import typing as typ

import msgspec

# Keys consumed by ``Record``; everything else is carried in ``extra``.
RECORD_FIELDS = frozenset({"monitor_tag", "description", "output"})


class Record(msgspec.Struct, kw_only=True, frozen=True):
    """One monitoring result pushed by a client.

    Attributes
    ----------
    tag : str
        Monitor tag used to route the record (wire name ``monitor_tag``).
    description : str
        Heading of the rendered block.
    payload : str
        Base64-encoded command output (wire name ``output``). Empty when the
        check produced nothing.
    extra : dict[str, Any]
        Any other keys of the incoming object, carried opaquely.

    """

    tag: str = msgspec.field(name="monitor_tag")
    description: str = ""
    payload: str = msgspec.field(default="", name="output")
    extra: dict[str, typ.Any] = msgspec.field(default_factory=dict)

    @property
    def has_payload(self) -> bool:
        """Return whether the record carries any output to render."""
        return bool(self.payload)


class ParsedBatch(msgspec.Struct, kw_only=True, frozen=True):
    """Records accepted from one request body.

    Attributes
    ----------
    records : tuple[Record, ...]
        Valid records in arrival order.
    skipped : int
        Number of objects rejected as malformed.

    """

    records: tuple[Record, ...]
    skipped: int = 0

    @property
    def received(self) -> int:
        """Total objects in the batch, valid or not."""
        return len(self.records) + self.skipped
