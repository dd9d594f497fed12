"""Stateless streaming decoder that reports one CBOR item per call."""

from __future__ import annotations

import struct
from typing import Any

from cborkit.data import DecoderResult, DecoderStatus

_ERROR = DecoderResult(0, DecoderStatus.ERROR, 0)

_INDEFINITE_STARTS = {
    2: "byte_string_start",
    3: "string_start",
    4: "indef_array_start",
    5: "indef_map_start",
}
_SIZED_EVENTS = {4: "array_start", 5: "map_start", 6: "tag"}
_WIDTH_BITS = (8, 16, 32, 64)
_FLOAT_FORMATS = {25: (">e", "float2"), 26: (">f", "float4"), 27: (">d", "float8")}


class Callbacks:
    """Receiver of decoded events.

    Events that a subclass does not handle itself are kept, in the order
    they arrive, as ``(name, args)`` pairs in ``_received``.
    """

    def _record(self, name: str, *args: Any) -> None:
        received = self.__dict__.get("_received")
        if received is None:
            received = self.__dict__["_received"] = []
        received.append((name, args))

    def uint8(self, value: int) -> None:
        """An unsigned integer stored in at most one byte."""
        self._record("uint8", value)

    def uint16(self, value: int) -> None:
        """An unsigned integer stored in two bytes."""
        self._record("uint16", value)

    def uint32(self, value: int) -> None:
        """An unsigned integer stored in four bytes."""
        self._record("uint32", value)

    def uint64(self, value: int) -> None:
        """An unsigned integer stored in eight bytes."""
        self._record("uint64", value)

    def negint8(self, value: int) -> None:
        """A negative integer payload stored in at most one byte."""
        self._record("negint8", value)

    def negint16(self, value: int) -> None:
        """A negative integer payload stored in two bytes."""
        self._record("negint16", value)

    def negint32(self, value: int) -> None:
        """A negative integer payload stored in four bytes."""
        self._record("negint32", value)

    def negint64(self, value: int) -> None:
        """A negative integer payload stored in eight bytes."""
        self._record("negint64", value)

    def byte_string(self, data: bytes) -> None:
        """A definite byte string."""
        self._record("byte_string", data)

    def byte_string_start(self) -> None:
        """The start of an indefinite byte string."""
        self._record("byte_string_start")

    def string(self, data: bytes) -> None:
        """A definite text string, as raw UTF-8 bytes."""
        self._record("string", data)

    def string_start(self) -> None:
        """The start of an indefinite text string."""
        self._record("string_start")

    def array_start(self, size: int) -> None:
        """The start of a definite array of ``size`` items."""
        self._record("array_start", size)

    def indef_array_start(self) -> None:
        """The start of an indefinite array."""
        self._record("indef_array_start")

    def map_start(self, size: int) -> None:
        """The start of a definite map of ``size`` pairs."""
        self._record("map_start", size)

    def indef_map_start(self) -> None:
        """The start of an indefinite map."""
        self._record("indef_map_start")

    def tag(self, value: int) -> None:
        """A tag applying to the next item."""
        self._record("tag", value)

    def float2(self, value: float) -> None:
        """A half-precision float."""
        self._record("float2", value)

    def float4(self, value: float) -> None:
        """A single-precision float."""
        self._record("float4", value)

    def float8(self, value: float) -> None:
        """A double-precision float."""
        self._record("float8", value)

    def undefined(self) -> None:
        """The undefined simple value."""
        self._record("undefined")

    def null(self) -> None:
        """The null simple value."""
        self._record("null")

    def boolean(self, value: bool) -> None:
        """A boolean simple value."""
        self._record("boolean", value)

    def indef_break(self) -> None:
        """The break that ends an indefinite item."""
        self._record("indef_break")


def _need_more(required: int) -> DecoderResult:
    return DecoderResult(0, DecoderStatus.NEDATA, required)


def _finished(read: int) -> DecoderResult:
    return DecoderResult(read, DecoderStatus.FINISHED, 0)


def _decode_simple(data: bytes, info: int, callbacks: Callbacks) -> DecoderResult:
    if info == 20 or info == 21:
        callbacks.boolean(info == 21)
    elif info == 22:
        callbacks.null()
    elif info == 23:
        callbacks.undefined()
    elif info == 31:
        callbacks.indef_break()
    elif info in _FLOAT_FORMATS:
        fmt, name = _FLOAT_FORMATS[info]
        size = struct.calcsize(fmt)
        if size > len(data) - 1:
            return _need_more(1 + size)
        (value,) = struct.unpack(fmt, data[1 : 1 + size])
        getattr(callbacks, name)(value)
        return _finished(1 + size)
    else:
        return _ERROR
    return _finished(1)


def stream_decode(source: bytes | bytearray | memoryview, callbacks: Callbacks) -> DecoderResult:
    """Decode the first item header of ``source`` and report it to ``callbacks``.

    Definite strings are reported whole; containers and tags only by their
    header. The result tells how many bytes were consumed, or how many are
    needed in total when the input is too short.
    """
    data = bytes(source)
    if not data:
        return _need_more(1)

    mtb = data[0]
    major, info = mtb >> 5, mtb & 0x1F

    if major == 7:
        return _decode_simple(data, info, callbacks)
    if 28 <= info <= 30:
        return _ERROR
    if info == 31:
        name = _INDEFINITE_STARTS.get(major)
        if name is None:
            return _ERROR
        getattr(callbacks, name)()
        return _finished(1)
    if major == 6 and 6 <= info <= 20:
        return _ERROR

    if info < 24:
        argument, read, bits = info, 1, 8
    else:
        size = 1 << (info - 24)
        if size > len(data) - 1:
            return _need_more(1 + size)
        argument = int.from_bytes(data[1 : 1 + size], "big")
        read, bits = 1 + size, _WIDTH_BITS[info - 24]

    if major in (2, 3):
        if argument > len(data) - read:
            return _need_more(read + argument)
        payload = data[read : read + argument]
        if major == 2:
            callbacks.byte_string(payload)
        else:
            callbacks.string(payload)
        return _finished(read + argument)

    if major == 0:
        getattr(callbacks, f"uint{bits}")(argument)
    elif major == 1:
        getattr(callbacks, f"negint{bits}")(argument)
    else:
        getattr(callbacks, _SIZED_EVENTS[major])(argument)
    return _finished(read)