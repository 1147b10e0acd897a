"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Any, Protocol

from trusted_contacts.application.dto import ContactDetails
from trusted_contacts.domain import Contact


class KeyValueStore(Protocol):
    """A single string-valued namespace (one preferences file)."""

    def get(self, key: str) -> str | None:
        """Return the stored string, or None if the key was never set."""
        ...

    def set(self, key: str, value: str) -> None:
        """Overwrite the value for key."""
        ...


class ContactListStore(Protocol):
    """Loads and saves the whole contact list."""

    def load(self) -> list[Contact]:
        ...

    def save(self, contacts: list[Contact]) -> None:
        ...


class ContactSource(Protocol):
    """Address book behind the picker. Identities are opaque to the core."""

    def lookup(self, identity: Any) -> ContactDetails | None:
        """Return name and phone capability for a picked identity, or None if it is gone."""
        ...

    def phone_numbers(self, identity: Any) -> list[str]:
        """Return the numbers associated with the identity, first one preferred."""
        ...


class PermissionAuthority(Protocol):
    """Grant state for reading contacts."""

    def is_granted(self) -> bool:
        ...
