"""
Trusted contacts core: clean-architecture layout.

- domain: Contact value object, palette and seed list. No outer dependencies.
- application: list state, ContactService, ports, DTOs.
- infrastructure: ContactStore (JSON in a key-value slot), key-value stores.
- flow: the add-contact XState machine and PickerBridge.
- ui: ListPresenter and avatar colors.
"""

from trusted_contacts.application import (
    ContactDetails,
    ContactListState,
    ContactService,
    ListChange,
)
from trusted_contacts.domain import Contact, seed_contacts
from trusted_contacts.flow import (
    ContactAdded,
    LaunchPicker,
    PickerBridge,
    RequestPermission,
    ShowNotice,
)
from trusted_contacts.infrastructure import (
    ContactStore,
    ContactStoreError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageParseError,
    StorageWriteError,
)
from trusted_contacts.ui import AddRow, ContactRow, ListPresenter

__all__ = [
    "AddRow",
    "Contact",
    "ContactAdded",
    "ContactDetails",
    "ContactListState",
    "ContactRow",
    "ContactService",
    "ContactStore",
    "ContactStoreError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "LaunchPicker",
    "ListChange",
    "ListPresenter",
    "PickerBridge",
    "RequestPermission",
    "ShowNotice",
    "StorageParseError",
    "StorageWriteError",
    "seed_contacts",
]
