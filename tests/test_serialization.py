import math

import pytest

from cborkit.data import (
    Array,
    ByteString,
    Ctrl,
    FloatCtrl,
    FloatWidth,
    IntWidth,
    Map,
    NegInt,
    Pair,
    UInt,
)
from cborkit.serialization import (
    BufferTooSmallError,
    serialize,
    serialize_alloc,
    serialize_array,
    serialize_bytestring,
    serialize_float_ctrl,
    serialize_map,
    serialize_negint,
    serialize_string,
    serialize_tag,
    serialize_uint,
)
from cborkit.strings import String, build_string
from cborkit.tags import Tag, build_tag


def half(value):
    return serialize_float_ctrl(FloatCtrl(width=FloatWidth.FLOAT_16, value=value), 512)


# Arrays


def test_embedded_array_start():
    assert serialize(Array([UInt(0)]), 512)[:1] == bytes([0x81])


def test_array_start_large():
    zero = UInt(0)
    out = serialize_alloc(Array([zero] * 1000000))
    assert out[:5] == bytes([0x9A, 0x00, 0x0F, 0x42, 0x40])
    assert len(out) == 5 + 1000000


def test_indef_array_start():
    with pytest.raises(BufferTooSmallError):
        serialize(Array(definite=False), 0)
    assert serialize(Array(definite=False), 512) == bytes([0x9F, 0xFF])


def test_indef_array_encoding():
    array = Array(definite=False)
    array.push(UInt(1))
    array.push(UInt(2))
    out = serialize_array(array, 512)
    assert len(out) == 4
    assert out == bytes([0x9F, 0x01, 0x02, 0xFF])


# Byte strings


def test_embedded_bytestring_start():
    assert serialize(ByteString(b"\xaa"), 512) == bytes([0x41, 0xAA])


def test_bytestring_start_large():
    out = serialize_bytestring(ByteString(bytes(1000000)), 2000000)
    assert out[:5] == bytes([0x5A, 0x00, 0x0F, 0x42, 0x40])
    assert len(out) == 1000005


def test_indef_bytestring_start():
    with pytest.raises(BufferTooSmallError):
        serialize_bytestring(ByteString(definite=False), 0)
    assert serialize_bytestring(ByteString(definite=False), 512) == bytes([0x5F, 0xFF])


def test_indef_bytestring_chunks():
    bs = ByteString(definite=False)
    bs.add_chunk(ByteString(b"\xa1"))
    bs.add_chunk(ByteString(b"\xa2"))
    assert serialize(bs, 512) == bytes([0x5F, 0x41, 0xA1, 0x41, 0xA2, 0xFF])


def test_bytestring_data_does_not_fit():
    with pytest.raises(BufferTooSmallError):
        serialize_bytestring(ByteString(b"Hello!"), 6)
    assert serialize_bytestring(ByteString(b"Hello!"), 7) == b"\x46Hello!"


# Strings


def test_definite_string():
    assert serialize_string(build_string("Hello!"), 512) == b"\x66Hello!"


def test_indef_string():
    s = String(definite=False)
    s.add_chunk(build_string("ab"))
    assert serialize_string(s, 512) == b"\x7f\x62ab\xff"


# Maps


def test_embedded_map_start():
    out = serialize_map(Map([Pair(UInt(0), UInt(1))]), 512)
    assert out == bytes([0xA1, 0x00, 0x01])


def test_map_start_large():
    pair = Pair(UInt(0), UInt(0))
    out = serialize_alloc(Map([pair] * 1000000))
    assert out[:5] == bytes([0xBA, 0x00, 0x0F, 0x42, 0x40])
    assert len(out) == 5 + 2000000


def test_indef_map_start():
    with pytest.raises(BufferTooSmallError):
        serialize_map(Map(definite=False), 0)
    assert serialize_map(Map(definite=False), 512) == bytes([0xBF, 0xFF])


# Tags


def test_embedded_tag():
    assert serialize_tag(build_tag(1, UInt(0)), 512) == bytes([0xC1, 0x00])


def test_tag_large():
    out = serialize_tag(build_tag(1000000, UInt(0)), 512)
    assert out == bytes([0xDA, 0x00, 0x0F, 0x42, 0x40, 0x00])


def test_tag_without_item():
    with pytest.raises(ValueError):
        serialize_tag(Tag(5), 512)


# Floats and simple values


def test_bools():
    assert serialize(FloatCtrl(ctrl=Ctrl.FALSE), 512) == bytes([0xF4])
    assert serialize(FloatCtrl(ctrl=Ctrl.TRUE), 512) == bytes([0xF5])


def test_null():
    assert serialize(FloatCtrl(ctrl=Ctrl.NULL), 512) == bytes([0xF6])


def test_undef():
    assert serialize(FloatCtrl(ctrl=Ctrl.UNDEF), 512) == bytes([0xF7])


def test_wide_ctrl():
    assert serialize(FloatCtrl(ctrl=0xAF), 512) == bytes([0xF8, 0xAF])


@pytest.mark.parametrize(
    "value, expected",
    [
        (1.5, [0xF9, 0x3E, 0x00]),
        (-0.0, [0xF9, 0x80, 0x00]),
        (0.0, [0xF9, 0x00, 0x00]),
        (65504.0, [0xF9, 0x7B, 0xFF]),
        (0.00006103515625, [0xF9, 0x04, 0x00]),
        (-4.0, [0xF9, 0xC4, 0x00]),
        (5.960464477539063e-8, [0xF9, 0x00, 0x01]),
        (5.960464477539062e-8, [0xF9, 0x00, 0x01]),
        (1e-25, [0xF9, 0x00, 0x00]),
        (1.1920928955078125e-7, [0xF9, 0x00, 0x02]),
        (-1.1920928955078124e-7, [0xF9, 0x80, 0x02]),
        (math.inf, [0xF9, 0x7C, 0x00]),
    ],
)
def test_half(value, expected):
    assert half(value) == bytes(expected)


def test_half_special():
    assert half(math.nan) == bytes([0xF9, 0x7E, 0x00])


def test_float():
    item = FloatCtrl(width=FloatWidth.FLOAT_32, value=3.4028234663852886e38)
    assert serialize_float_ctrl(item, 512) == bytes([0xFA, 0x7F, 0x7F, 0xFF, 0xFF])


def test_double():
    item = FloatCtrl(width=FloatWidth.FLOAT_64, value=1.0e300)
    assert serialize_float_ctrl(item, 512) == bytes(
        [0xFB, 0x7E, 0x37, 0xE4, 0x3C, 0x88, 0x00, 0x75, 0x9C]
    )


# Unsigned integers


def test_embedded_uint8():
    assert serialize_uint(UInt(14), 512) == bytes([0x0E])


def test_uint8():
    with pytest.raises(BufferTooSmallError):
        serialize_uint(UInt(180, IntWidth.INT_8), 1)
    assert serialize_uint(UInt(255, IntWidth.INT_8), 512) == bytes([0x18, 0xFF])


def test_uint16():
    with pytest.raises(BufferTooSmallError):
        serialize_uint(UInt(1000, IntWidth.INT_16), 2)
    assert serialize_uint(UInt(1000, IntWidth.INT_16), 512) == bytes([0x19, 0x03, 0xE8])


def test_uint32():
    with pytest.raises(BufferTooSmallError):
        serialize_uint(UInt(1000000, IntWidth.INT_32), 4)
    assert serialize_uint(UInt(1000000, IntWidth.INT_32), 512) == bytes(
        [0x1A, 0x00, 0x0F, 0x42, 0x40]
    )


def test_uint64():
    item = UInt(18446744073709551615, IntWidth.INT_64)
    with pytest.raises(BufferTooSmallError):
        serialize_uint(item, 8)
    assert serialize_uint(item, 512) == bytes([0x1B] + [0xFF] * 8)


@pytest.mark.parametrize(
    "value, expected",
    [
        (18446744073709551615, [0x1B] + [0xFF] * 8),
        (1000000, [0x1A, 0x00, 0x0F, 0x42, 0x40]),
        (1000, [0x19, 0x03, 0xE8]),
        (255, [0x18, 0xFF]),
    ],
)
def test_unspecified_width(value, expected):
    assert serialize(UInt(value), 512) == bytes(expected)


def test_wide_width_for_small_value():
    assert serialize_uint(UInt(1, IntWidth.INT_32), 512) == bytes([0x1A, 0, 0, 0, 1])


# Negative integers


def test_negint():
    assert serialize_negint(NegInt(0), 512) == bytes([0x20])
    assert serialize_negint(NegInt(499, IntWidth.INT_16), 512) == bytes([0x39, 0x01, 0xF3])


# Generic behaviour


def test_nested_structure():
    item = Map([Pair(build_string("a"), Array([UInt(1), NegInt(0)]))])
    assert serialize_alloc(item) == bytes([0xA1, 0x61, 0x61, 0x82, 0x01, 0x20])


def test_exact_buffer_size_fits():
    item = Array([UInt(1), UInt(2)])
    encoded = serialize_alloc(item)
    assert serialize(item, len(encoded)) == encoded
    with pytest.raises(BufferTooSmallError):
        serialize(item, len(encoded) - 1)


def test_wrong_type_rejected():
    with pytest.raises(TypeError):
        serialize_uint(NegInt(1), 512)


def test_negative_buffer_size():
    with pytest.raises(ValueError):
        serialize(UInt(1), -1)