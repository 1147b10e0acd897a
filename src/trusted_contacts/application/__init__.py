"""Application layer: list state, use cases, ports and DTOs. Depends only on domain."""

from trusted_contacts.application.contact_list import ContactListState
from trusted_contacts.application.contact_service import ContactService
from trusted_contacts.application.dto import ContactDetails, ListChange
from trusted_contacts.application.ports import (
    ContactListStore,
    ContactSource,
    KeyValueStore,
    PermissionAuthority,
)

__all__ = [
    "ContactDetails",
    "ContactListState",
    "ContactListStore",
    "ContactService",
    "ContactSource",
    "KeyValueStore",
    "ListChange",
    "PermissionAuthority",
]
