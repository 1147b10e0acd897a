"""Add, delete and list trusted contacts. Every mutation is persisted immediately."""

import logging
import random

from trusted_contacts.application.contact_list import ContactListState
from trusted_contacts.application.ports import ContactListStore
from trusted_contacts.domain import Contact

logger = logging.getLogger(__name__)


class ContactService:
    """Owns the list state and writes the full list after each change."""

    def __init__(
        self,
        state: ContactListState,
        store: ContactListStore,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._state = state
        self._store = store
        self._rng = rng or random.Random()

    @classmethod
    def open(
        cls, store: ContactListStore, *, rng: random.Random | None = None
    ) -> "ContactService":
        """Cold start: load the persisted list (or the seed list) into a fresh state."""
        return cls(ContactListState(store.load()), store, rng=rng)

    @property
    def state(self) -> ContactListState:
        return self._state

    def list_contacts(self) -> list[Contact]:
        return self._state.snapshot()

    def add_contact(self, name: str | None, number: str) -> Contact:
        """Create a contact from picker data, append it and persist the list."""
        contact = Contact.create(name, number, rng=self._rng)
        self._state.append(contact)
        logger.info("Added trusted contact %s", contact.name)
        self._save()
        return contact

    def delete_contact(self, contact: Contact) -> bool:
        """Remove the first matching contact. Persists only when something was removed."""
        removed = self._state.remove_by_identity(contact)
        if not removed:
            logger.info("Delete ignored, %s is not in the list", contact.name)
            return False
        logger.info("Deleted trusted contact %s", contact.name)
        self._save()
        return True

    def _save(self) -> None:
        self._store.save(self._state.snapshot())
