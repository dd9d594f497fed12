"""Tag items (major type 6)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cborkit.data import UINT64_MAX, CborType, Item


@dataclass
class Tag(Item):
    """A tag value applied to one tagged item."""

    type: ClassVar[CborType] = CborType.TAG
    value: int = 0
    item: Item | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.value <= UINT64_MAX:
            raise ValueError(f"tag value {self.value} outside 0..2**64-1")
        if self.item is not None and not isinstance(self.item, Item):
            raise TypeError("the tagged item must be a CBOR item")

    def set_item(self, tagged_item: Item) -> None:
        """Set the tagged item."""
        if not isinstance(tagged_item, Item):
            raise TypeError("the tagged item must be a CBOR item")
        self.item = tagged_item


def new_tag(value: int) -> Tag:
    """A new tag with no tagged item."""
    return Tag(value)


def build_tag(value: int, item: Item) -> Tag:
    """A new tag wrapping ``item``."""
    tag = new_tag(value)
    tag.set_item(item)
    return tag