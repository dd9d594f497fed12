# cborkit

A small, dependency-free toolkit for CBOR (Concise Binary Object
Representation) data.

- `cborkit.data` holds the data model: the `CborType`, `IntWidth`,
  `FloatWidth`, `Ctrl` and `DecoderStatus` enums, the `DecoderResult`
  record, and the item classes `UInt`, `NegInt`, `ByteString`, `Array`,
  `Map` (of `Pair`s) and `FloatCtrl`.
- `cborkit.strings` holds `String` (text, definite or chunked) and the
  helpers `new_definite_string`, `new_indefinite_string`, `build_string`
  and `build_stringn`.
- `cborkit.tags` holds `Tag` with `new_tag` and `build_tag`.
- `cborkit.serialization` turns items into their CBOR encoding.
- `cborkit.streaming` decodes one item header at a time and reports it
  through a `Callbacks` object.

## Installation

From a checkout:

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Items

Integers keep the width they are encoded in; when none is given the
smallest one that fits is chosen. `NegInt.value` is the encoded payload and
`NegInt.number` the integer it stands for (`-1 - value`).

```python
from cborkit.data import Array, IntWidth, NegInt, UInt

UInt(500).width                    # IntWidth.INT_16
UInt(1, IntWidth.INT_32)           # encoded in four bytes
NegInt(0).number                   # -1

arr = Array(capacity=2)            # a definite array with two slots
arr.push(UInt(1))
arr.push(UInt(2))
# a third push raises ValueError; Array(definite=False) grows freely
```

Indefinite byte strings and text strings are built from definite chunks:

```python
from cborkit.strings import build_string, new_indefinite_string

text = new_indefinite_string()
text.add_chunk(build_string("Hello, "))
text.add_chunk(build_string("world"))
text.codepoint_count               # 12
```

`build_string` stops at the first NUL character; `build_stringn(val, length)`
takes exactly the first `length` bytes.

## Serialization

```python
from cborkit.serialization import serialize, serialize_alloc
from cborkit.strings import build_string
from cborkit.tags import build_tag

item = build_tag(1, build_string("hello"))
serialize_alloc(item)              # b'\xc1ehello'
serialize(item, 4)                 # raises BufferTooSmallError
```

`serialize(item, buffer_size)` raises `BufferTooSmallError` (a `ValueError`)
when the encoding would be longer than `buffer_size` bytes;
`serialize_alloc(item)` has no limit. There are also per-type functions
(`serialize_uint`, `serialize_negint`, `serialize_bytestring`,
`serialize_string`, `serialize_array`, `serialize_map`, `serialize_tag`,
`serialize_float_ctrl`) that raise `TypeError` when given another kind of
item. A `Tag` with no tagged item raises `ValueError`. Half-precision floats
round values too small to represent to the nearest subnormal or to zero, and
NaN is written as `0x7E00`.

## Streaming decoding

`stream_decode(source, callbacks)` looks at the start of `source`, calls the
matching `Callbacks` method and returns a `DecoderResult`. Definite byte and
text strings are delivered whole as bytes; arrays, maps and tags are reported
by their header only, so the caller drives the nesting.

Subclass `Callbacks` and override the events you need. Events that are not
overridden are kept, in order, as `(name, args)` pairs in the instance's
`_received` list.

```python
from cborkit.data import DecoderStatus
from cborkit.streaming import Callbacks, stream_decode

class Printer(Callbacks):
    def uint8(self, value):
        print("uint", value)

    def string(self, data):
        print("text", data.decode("utf-8"))

data = bytes([0x18, 0xFF])
result = stream_decode(data, Printer())
if result.status is DecoderStatus.FINISHED:
    data = data[result.read:]
elif result.status is DecoderStatus.NEDATA:
    print("need at least", result.required, "bytes")
```

With `NEDATA`, `required` is the total number of bytes from the start of
`source` needed to decode the item (1 for empty input). `ERROR` means the
leading byte is reserved or unassigned.

## What it does not do

There is no high-level loader that turns encoded bytes into a tree of items:
`LoadResult`, `CborError` and `ErrorCode` describe the outcome of such a load,
but decoding here is only the event-by-event `stream_decode`. There is no
command-line tool either.