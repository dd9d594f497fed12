"""Serialization of CBOR items into their binary encoding."""

from __future__ import annotations

import math
import struct
from typing import Callable

from cborkit.data import (
    Array,
    ByteString,
    CborType,
    FloatCtrl,
    FloatWidth,
    IntWidth,
    Item,
    Map,
    NegInt,
    UInt,
)
from cborkit.strings import String
from cborkit.tags import Tag

_BREAK = b"\xff"
_INDEF_BYTESTRING = 0x5F
_INDEF_STRING = 0x7F
_INDEF_ARRAY = 0x9F
_INDEF_MAP = 0xBF

_HEAD_FORMATS = {
    IntWidth.INT_16: (25, ">BH"),
    IntWidth.INT_32: (26, ">BI"),
    IntWidth.INT_64: (27, ">BQ"),
}


class BufferTooSmallError(ValueError):
    """The encoding of an item does not fit in the given buffer size."""

    def __init__(self, buffer_size: int) -> None:
        super().__init__(f"encoding does not fit in {buffer_size} bytes")
        self.buffer_size = buffer_size


class _Sink:
    """Collects output bytes, refusing to grow past an optional limit."""

    __slots__ = ("buf", "limit")

    def __init__(self, limit: int | None) -> None:
        self.buf = bytearray()
        self.limit = limit

    def write(self, data: bytes) -> None:
        if self.limit is not None and len(self.buf) + len(data) > self.limit:
            raise BufferTooSmallError(self.limit)
        self.buf += data


def _smallest_width(value: int) -> IntWidth:
    for width in IntWidth:
        if value <= width.max_value:
            return width
    raise ValueError(f"value {value} does not fit in 64 bits")


def _head(major: int, value: int, width: IntWidth | None = None) -> bytes:
    """Initial byte(s) for a major type and argument, in the given width."""
    if width is None:
        width = _smallest_width(value)
    if value > width.max_value or value < 0:
        raise ValueError(f"value {value} does not fit width {width.name}")
    base = major << 5
    if width is IntWidth.INT_8:
        if value <= 23:
            return bytes((base | value,))
        return bytes((base | 24, value))
    marker, fmt = _HEAD_FORMATS[width]
    return struct.pack(fmt, base | marker, value)


def _float32_bytes(value: float) -> bytes:
    try:
        return struct.pack(">f", value)
    except OverflowError:
        return struct.pack(">f", math.copysign(math.inf, value))


def _half_bits(value: float) -> int:
    """IEEE half-precision bits, rounding tiny magnitudes as the format fixes."""
    (val,) = struct.unpack(">I", _float32_bytes(value))
    exp = (val >> 23) & 0xFF
    mant = val & 0x7FFFFF
    sign = (val & 0x80000000) >> 16
    if exp == 0xFF:
        if math.isnan(value):
            return 0x7E00
        return (sign | 0x7C00 | ((1 if mant else 0) << 15)) & 0xFFFF
    if exp == 0:
        return sign | (mant >> 13)
    logical_exp = exp - 127
    if logical_exp < -24:
        return 0
    if logical_exp < -14:
        return sign | (1 << (24 + logical_exp))
    return (sign | (((logical_exp & 0xFF) + 15) << 10) | (mant >> 13)) & 0xFFFF


def _require(item: Item, cls: type, what: str) -> None:
    if not isinstance(item, cls):
        raise TypeError(f"expected {what}, got {type(item).__name__}")


def _write_uint(item: UInt, sink: _Sink) -> None:
    _require(item, UInt, "an unsigned integer")
    sink.write(_head(0, item.value, item.width))


def _write_negint(item: NegInt, sink: _Sink) -> None:
    _require(item, NegInt, "a negative integer")
    sink.write(_head(1, item.value, item.width))


def _write_bytestring(item: ByteString, sink: _Sink) -> None:
    _require(item, ByteString, "a byte string")
    if item.is_definite:
        sink.write(_head(2, item.length))
        sink.write(item.data)
        return
    sink.write(bytes((_INDEF_BYTESTRING,)))
    for chunk in item.chunks:
        _write_bytestring(chunk, sink)
    sink.write(_BREAK)


def _write_string(item: String, sink: _Sink) -> None:
    _require(item, String, "a string")
    if item.is_definite:
        sink.write(_head(3, item.length))
        sink.write(item.data)
        return
    sink.write(bytes((_INDEF_STRING,)))
    for chunk in item.chunks:
        _write_string(chunk, sink)
    sink.write(_BREAK)


def _write_array(item: Array, sink: _Sink) -> None:
    _require(item, Array, "an array")
    if item.is_definite:
        sink.write(_head(4, item.size))
    else:
        sink.write(bytes((_INDEF_ARRAY,)))
    for element in item.items:
        _write(element, sink)
    if item.is_indefinite:
        sink.write(_BREAK)


def _write_map(item: Map, sink: _Sink) -> None:
    _require(item, Map, "a map")
    if item.is_definite:
        sink.write(_head(5, item.size))
    else:
        sink.write(bytes((_INDEF_MAP,)))
    for pair in item.pairs:
        _write(pair.key, sink)
        _write(pair.value, sink)
    if item.is_indefinite:
        sink.write(_BREAK)


def _write_tag(item: Tag, sink: _Sink) -> None:
    _require(item, Tag, "a tag")
    if item.item is None:
        raise ValueError("tag has no tagged item")
    sink.write(_head(6, item.value))
    _write(item.item, sink)


def _write_float_ctrl(item: FloatCtrl, sink: _Sink) -> None:
    _require(item, FloatCtrl, "a float or simple value")
    width = item.width
    if width is FloatWidth.FLOAT_0:
        sink.write(_head(7, int(item.ctrl), IntWidth.INT_8))
    elif width is FloatWidth.FLOAT_16:
        sink.write(struct.pack(">BH", 0xF9, _half_bits(item.value)))
    elif width is FloatWidth.FLOAT_32:
        sink.write(b"\xfa" + _float32_bytes(item.value))
    else:
        sink.write(struct.pack(">Bd", 0xFB, item.value))


_WRITERS: dict[CborType, Callable[[Item, _Sink], None]] = {
    CborType.UINT: _write_uint,
    CborType.NEGINT: _write_negint,
    CborType.BYTESTRING: _write_bytestring,
    CborType.STRING: _write_string,
    CborType.ARRAY: _write_array,
    CborType.MAP: _write_map,
    CborType.TAG: _write_tag,
    CborType.FLOAT_CTRL: _write_float_ctrl,
}


def _write(item: Item, sink: _Sink) -> None:
    if not isinstance(item, Item):
        raise TypeError(f"expected a CBOR item, got {type(item).__name__}")
    _WRITERS[item.type](item, sink)


def _run(writer: Callable[[Item, _Sink], None], item: Item, buffer_size: int | None) -> bytes:
    if buffer_size is not None and buffer_size < 0:
        raise ValueError("buffer size must not be negative")
    sink = _Sink(buffer_size)
    writer(item, sink)
    return bytes(sink.buf)


def serialize(item: Item, buffer_size: int) -> bytes:
    """Encode any item; raise BufferTooSmallError if it exceeds ``buffer_size``."""
    return _run(_write, item, buffer_size)


def serialize_alloc(item: Item) -> bytes:
    """Encode any item with no size limit."""
    return _run(_write, item, None)


def serialize_uint(item: UInt, buffer_size: int) -> bytes:
    """Encode an unsigned integer in its stored width."""
    return _run(_write_uint, item, buffer_size)


def serialize_negint(item: NegInt, buffer_size: int) -> bytes:
    """Encode a negative integer in its stored width."""
    return _run(_write_negint, item, buffer_size)


def serialize_bytestring(item: ByteString, buffer_size: int) -> bytes:
    """Encode a definite or chunked byte string."""
    return _run(_write_bytestring, item, buffer_size)


def serialize_string(item: String, buffer_size: int) -> bytes:
    """Encode a definite or chunked text string."""
    return _run(_write_string, item, buffer_size)


def serialize_array(item: Array, buffer_size: int) -> bytes:
    """Encode an array and its elements."""
    return _run(_write_array, item, buffer_size)


def serialize_map(item: Map, buffer_size: int) -> bytes:
    """Encode a map and its pairs."""
    return _run(_write_map, item, buffer_size)


def serialize_tag(item: Tag, buffer_size: int) -> bytes:
    """Encode a tag followed by its tagged item."""
    return _run(_write_tag, item, buffer_size)


def serialize_float_ctrl(item: FloatCtrl, buffer_size: int) -> bytes:
    """Encode a float of its stored width, or a simple value."""
    return _run(_write_float_ctrl, item, buffer_size)