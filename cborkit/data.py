"""Core CBOR data model: major types, widths, item classes and result records."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, Iterator

UINT64_MAX = (1 << 64) - 1


class CborType(enum.IntEnum):
    """Major type of a CBOR item."""

    UINT = 0
    NEGINT = 1
    BYTESTRING = 2
    STRING = 3
    ARRAY = 4
    MAP = 5
    TAG = 6
    FLOAT_CTRL = 7


class ErrorCode(enum.IntEnum):
    """Possible decoding errors."""

    NONE = 0
    NOT_ENOUGH_DATA = 1
    NO_DATA = 2
    MALFORMATTED = 3
    MEMORY_ERROR = 4
    SYNTAX_ERROR = 5


class IntWidth(enum.IntEnum):
    """Possible widths of integer items."""

    INT_8 = 0
    INT_16 = 1
    INT_32 = 2
    INT_64 = 3

    @property
    def size(self) -> int:
        """Number of bytes the width occupies on the wire."""
        return 1 << self.value

    @property
    def max_value(self) -> int:
        """Largest value representable in this width."""
        return (1 << (8 * self.size)) - 1


class FloatWidth(enum.IntEnum):
    """Possible widths of float/ctrl items; FLOAT_0 marks ctrl values."""

    FLOAT_0 = 0
    FLOAT_16 = 1
    FLOAT_32 = 2
    FLOAT_64 = 3


class Ctrl(enum.IntEnum):
    """Semantic mapping of simple values."""

    NONE = 0
    FALSE = 20
    TRUE = 21
    NULL = 22
    UNDEF = 23


class DecoderStatus(enum.IntEnum):
    """Status of a streaming decoder step."""

    FINISHED = 0
    NEDATA = 1
    ERROR = 2


@dataclass(frozen=True)
class DecoderResult:
    """Outcome of one streaming decoder step."""

    read: int = 0
    status: DecoderStatus = DecoderStatus.FINISHED
    required: int = 0


class CborError(Exception):
    """High-level decoding error with an approximate position."""

    def __init__(self, code: ErrorCode, position: int = 0) -> None:
        super().__init__(f"{code.name} at position {position}")
        self.code = code
        self.position = position


@dataclass
class LoadResult:
    """Outcome of a high-level load: bytes read and any error."""

    read: int = 0
    error: CborError | None = None

    @property
    def code(self) -> ErrorCode:
        """The error code, NONE on success."""
        return ErrorCode.NONE if self.error is None else self.error.code


class Item:
    """Base class of every CBOR data item."""

    type: ClassVar[CborType]


@dataclass
class Pair:
    """A key/value pair held by a map."""

    key: Item
    value: Item


def _smallest_width(value: int) -> IntWidth:
    for width in IntWidth:
        if value <= width.max_value:
            return width
    raise ValueError(f"value {value} does not fit in 64 bits")


@dataclass
class _Integer(Item):
    value: int
    width: IntWidth | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.value <= UINT64_MAX:
            raise ValueError(f"integer payload {self.value} outside 0..2**64-1")
        if self.width is None:
            self.width = _smallest_width(self.value)
        else:
            self.width = IntWidth(self.width)
            if self.value > self.width.max_value:
                raise OverflowError(
                    f"value {self.value} does not fit width {self.width.name}"
                )


@dataclass
class UInt(_Integer):
    """Unsigned integer (major type 0)."""

    type: ClassVar[CborType] = CborType.UINT


@dataclass
class NegInt(_Integer):
    """Negative integer (major type 1); ``value`` is the encoded payload."""

    type: ClassVar[CborType] = CborType.NEGINT

    @property
    def number(self) -> int:
        """The integer this item represents, ``-1 - value``."""
        return -1 - self.value


@dataclass
class ByteString(Item):
    """Byte string (major type 2), definite or chunked."""

    type: ClassVar[CborType] = CborType.BYTESTRING
    data: bytes = b""
    definite: bool = True
    chunks: list[ByteString] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        self.chunks = list(self.chunks)
        if self.definite and self.chunks:
            raise ValueError("a definite byte string has no chunks")
        if not self.definite and self.data:
            raise ValueError("an indefinite byte string holds data only in chunks")

    @property
    def is_definite(self) -> bool:
        return self.definite

    @property
    def is_indefinite(self) -> bool:
        return not self.definite

    @property
    def length(self) -> int:
        """Length of the data; zero for indefinite byte strings."""
        return len(self.data)

    @property
    def chunk_count(self) -> int:
        if self.definite:
            raise ValueError("a definite byte string has no chunks")
        return len(self.chunks)

    def add_chunk(self, chunk: ByteString) -> None:
        """Append a definite byte string chunk to an indefinite byte string."""
        if self.definite:
            raise ValueError("chunks can only be added to an indefinite byte string")
        if not isinstance(chunk, ByteString):
            raise TypeError("a byte string chunk must be a ByteString")
        if not chunk.definite:
            raise ValueError("a byte string chunk must be definite")
        self.chunks.append(chunk)


@dataclass
class Array(Item):
    """Array (major type 4); a definite array has a fixed capacity."""

    type: ClassVar[CborType] = CborType.ARRAY
    items: list[Item] = field(default_factory=list)
    definite: bool = True
    capacity: int | None = None

    def __post_init__(self) -> None:
        self.items = list(self.items)
        if self.definite:
            if self.capacity is None:
                self.capacity = len(self.items)
            elif self.capacity < len(self.items):
                raise ValueError("capacity is smaller than the number of items")
        elif self.capacity is not None:
            raise ValueError("an indefinite array has no fixed capacity")

    @property
    def is_definite(self) -> bool:
        return self.definite

    @property
    def is_indefinite(self) -> bool:
        return not self.definite

    @property
    def size(self) -> int:
        return len(self.items)

    @property
    def allocated(self) -> int:
        """Slots available: the capacity if definite, the size otherwise."""
        return self.capacity if self.definite else len(self.items)

    def push(self, item: Item) -> None:
        """Append an item; a full definite array refuses it."""
        if not isinstance(item, Item):
            raise TypeError("only CBOR items can be pushed")
        if self.definite and len(self.items) >= self.capacity:
            raise ValueError("definite array is full")
        self.items.append(item)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Item:
        return self.items[index]


@dataclass
class Map(Item):
    """Map (major type 5) of ordered pairs; a definite map has a fixed capacity."""

    type: ClassVar[CborType] = CborType.MAP
    pairs: list[Pair] = field(default_factory=list)
    definite: bool = True
    capacity: int | None = None

    def __post_init__(self) -> None:
        self.pairs = list(self.pairs)
        if self.definite:
            if self.capacity is None:
                self.capacity = len(self.pairs)
            elif self.capacity < len(self.pairs):
                raise ValueError("capacity is smaller than the number of pairs")
        elif self.capacity is not None:
            raise ValueError("an indefinite map has no fixed capacity")

    @property
    def is_definite(self) -> bool:
        return self.definite

    @property
    def is_indefinite(self) -> bool:
        return not self.definite

    @property
    def size(self) -> int:
        return len(self.pairs)

    @property
    def allocated(self) -> int:
        return self.capacity if self.definite else len(self.pairs)

    def add(self, pair: Pair) -> None:
        """Append a pair; a full definite map refuses it."""
        if not isinstance(pair, Pair):
            raise TypeError("only Pair instances can be added to a map")
        if self.definite and len(self.pairs) >= self.capacity:
            raise ValueError("definite map is full")
        self.pairs.append(pair)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.pairs)


@dataclass
class FloatCtrl(Item):
    """Float or simple value (major type 7)."""

    type: ClassVar[CborType] = CborType.FLOAT_CTRL
    width: FloatWidth = FloatWidth.FLOAT_0
    value: float = 0.0
    ctrl: int = Ctrl.NONE

    def __post_init__(self) -> None:
        self.width = FloatWidth(self.width)
        if not 0 <= self.ctrl <= 0xFF:
            raise ValueError(f"simple value {self.ctrl} outside 0..255")
        if self.width is not FloatWidth.FLOAT_0 and self.ctrl != Ctrl.NONE:
            raise ValueError("a float item carries no simple value")

    @property
    def is_ctrl(self) -> bool:
        return self.width is FloatWidth.FLOAT_0