"""Text string items (major type 3), definite or chunked."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from cborkit.data import CborType, Item


@dataclass
class String(Item):
    """UTF-8 text string; indefinite strings hold definite chunks."""

    type: ClassVar[CborType] = CborType.STRING
    data: bytes = b""
    definite: bool = True
    chunks: list[String] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        self.chunks = list(self.chunks)
        if self.definite and self.chunks:
            raise ValueError("a definite string has no chunks")
        if not self.definite and self.data:
            raise ValueError("an indefinite string holds data only in chunks")

    @property
    def is_definite(self) -> bool:
        return self.definite

    @property
    def is_indefinite(self) -> bool:
        return not self.definite

    @property
    def length(self) -> int:
        """Byte length of the data; zero for indefinite strings."""
        return len(self.data)

    @property
    def codepoint_count(self) -> int:
        """Number of code points; the chunks' sum for indefinite strings."""
        if not self.definite:
            return sum(chunk.codepoint_count for chunk in self.chunks)
        try:
            return len(self.data.decode("utf-8"))
        except UnicodeDecodeError:
            return 0

    @property
    def chunk_count(self) -> int:
        if self.definite:
            raise ValueError("a definite string has no chunks")
        return len(self.chunks)

    def set_handle(self, data: bytes) -> None:
        """Replace the data of a definite string."""
        if not self.definite:
            raise ValueError("only a definite string holds data directly")
        self.data = bytes(data)

    def add_chunk(self, chunk: String) -> None:
        """Append a definite string chunk to an indefinite string."""
        if self.definite:
            raise ValueError("chunks can only be added to an indefinite string")
        if not isinstance(chunk, String):
            raise TypeError("a string chunk must be a String")
        if not chunk.definite:
            raise ValueError("a string chunk must be definite")
        self.chunks.append(chunk)


def _as_bytes(val: str | bytes) -> bytes:
    return val.encode("utf-8") if isinstance(val, str) else bytes(val)


def new_definite_string() -> String:
    """A new, empty definite string."""
    return String()


def new_indefinite_string() -> String:
    """A new indefinite string with no chunks."""
    return String(definite=False)


def build_string(val: str | bytes) -> String:
    """A definite string holding ``val`` up to its first NUL."""
    data = _as_bytes(val)
    return String(data.split(b"\x00", 1)[0])


def build_stringn(val: str | bytes, length: int) -> String:
    """A definite string holding the first ``length`` bytes of ``val``."""
    data = _as_bytes(val)
    if length < 0 or length > len(data):
        raise ValueError(f"length {length} outside 0..{len(data)}")
    return String(data[:length])