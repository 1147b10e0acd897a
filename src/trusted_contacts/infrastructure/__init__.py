"""Infrastructure layer: concrete implementations of application ports."""

from trusted_contacts.infrastructure.contact_store import (
    KEY_CONTACTS,
    PREFS_NAME,
    ContactStore,
    ContactStoreError,
    StorageParseError,
    StorageWriteError,
)
from trusted_contacts.infrastructure.key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)

__all__ = [
    "KEY_CONTACTS",
    "PREFS_NAME",
    "ContactStore",
    "ContactStoreError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "StorageParseError",
    "StorageWriteError",
]
