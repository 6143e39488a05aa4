"""Record store: all persistence I/O lives here."""

from record_store.backends import JsonFileBackend, MemoryBackend, StorageBackend
from record_store.collection import Collection, SessionCollection
from record_store.exceptions import StorageError
from record_store.store import ProfileStore, RecordStore

__all__ = [
    "Collection",
    "JsonFileBackend",
    "MemoryBackend",
    "ProfileStore",
    "RecordStore",
    "SessionCollection",
    "StorageBackend",
    "StorageError",
]
