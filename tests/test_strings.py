import pytest

from cborkit.data import CborType, UInt
from cborkit.strings import (
    String,
    build_string,
    build_stringn,
    new_definite_string,
    new_indefinite_string,
)


def test_new_definite_string_is_empty():
    string = new_definite_string()
    assert string.is_definite
    assert string.length == 0
    assert string.type is CborType.STRING


def test_new_indefinite_string_has_no_chunks():
    string = new_indefinite_string()
    assert string.is_indefinite
    assert string.chunk_count == 0
    assert string.length == 0


def test_build_string():
    string = build_string("Test")
    assert string.data == b"Test"
    assert string.length == 4


def test_build_stringn():
    string = build_stringn("Test", 4)
    assert string.data == b"Test"
    assert build_stringn("Test", 2).data == b"Te"


def test_build_stringn_too_long():
    with pytest.raises(ValueError):
        build_stringn("Te", 4)


def test_build_string_stops_at_nul():
    assert build_string("ab\0cd").data == b"ab"


def test_string_add_chunk():
    string = new_indefinite_string()
    chunk = build_string("Hello!")
    string.add_chunk(chunk)
    assert string.chunk_count == 1
    assert string.chunks[0] is chunk


def test_failed_add_chunk_leaves_string_intact():
    string = new_indefinite_string()
    with pytest.raises(TypeError):
        string.add_chunk(UInt(0))
    with pytest.raises(ValueError):
        string.add_chunk(new_indefinite_string())
    assert string.chunk_count == 0


def test_add_chunk_to_definite_rejected():
    string = build_string("Hello!")
    with pytest.raises(ValueError):
        string.add_chunk(build_string("x"))
    with pytest.raises(ValueError):
        _ = string.chunk_count


def test_set_handle():
    string = new_definite_string()
    string.set_handle(b"Hello!")
    assert string.data == b"Hello!"
    assert string.length == len(b"Hello!")
    with pytest.raises(ValueError):
        new_indefinite_string().set_handle(b"Hello!")


def test_codepoint_count():
    assert build_string("Hello!").codepoint_count == 6
    accented = build_string("é")
    assert accented.codepoint_count == 1
    assert accented.length == 2


def test_indefinite_codepoint_count_sums_chunks():
    string = new_indefinite_string()
    string.add_chunk(build_string("Hello!"))
    string.add_chunk(build_string("Test"))
    assert string.codepoint_count == 10


def test_indefinite_string_with_data_rejected():
    with pytest.raises(ValueError):
        String(b"Test", definite=False)