"""CBOR data items, serialization and a callback-driven streaming decoder."""

__version__ = "0.1.0"
__all__ = ["data", "strings", "tags", "serialization", "streaming"]