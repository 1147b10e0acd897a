"""Contact list persistence as a JSON array in a key-value slot."""

import json
import logging

from trusted_contacts.application.ports import KeyValueStore
from trusted_contacts.domain import Contact, seed_contacts

logger = logging.getLogger(__name__)

PREFS_NAME = "TrustedContactsPrefs"
KEY_CONTACTS = "contacts_list"

_STRING_FIELDS = ("name", "number", "initial", "colorHex")


class ContactStoreError(Exception):
    """Base error for contact list persistence."""


class StorageParseError(ContactStoreError):
    """The stored value is not a valid contact list."""


class StorageWriteError(ContactStoreError):
    """The key-value store refused the write."""


def contact_to_dict(contact: Contact) -> dict:
    return {
        "name": contact.name,
        "number": contact.number,
        "initial": contact.initial,
        "colorHex": contact.color_hex,
        "isPrimary": contact.is_primary,
    }


def contact_from_dict(data: dict) -> Contact:
    """Build a Contact from one stored object. Unknown keys are ignored."""
    if not isinstance(data, dict):
        raise StorageParseError(f"Contact entry must be an object, got {type(data).__name__}")
    for key in _STRING_FIELDS:
        if not isinstance(data.get(key), str):
            raise StorageParseError(f"Contact entry field '{key}' must be a string")
    if not isinstance(data.get("isPrimary"), bool):
        raise StorageParseError("Contact entry field 'isPrimary' must be a boolean")
    try:
        return Contact(
            name=data["name"],
            number=data["number"],
            initial=data["initial"],
            color_hex=data["colorHex"],
            is_primary=data["isPrimary"],
        )
    except ValueError as e:
        raise StorageParseError(str(e)) from e


def dumps_contacts(contacts: list[Contact]) -> str:
    return json.dumps(
        [contact_to_dict(c) for c in contacts],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def loads_contacts(raw: str) -> list[Contact]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageParseError(f"Stored contact list is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise StorageParseError("Stored contact list must be a JSON array")
    return [contact_from_dict(item) for item in data]


class ContactStore:
    """Reads and writes the whole list under one key. No partial updates, no versioning."""

    def __init__(self, prefs: KeyValueStore, key: str = KEY_CONTACTS) -> None:
        self._prefs = prefs
        self._key = key

    def load(self) -> list[Contact]:
        """Return the stored list, installing and persisting the seed list if nothing is stored.

        A value that cannot be parsed raises StorageParseError and is left as is.
        """
        try:
            raw = self._prefs.get(self._key)
        except ValueError as e:
            logger.error("Preferences holding '%s' are unreadable: %s", self._key, e)
            raise StorageParseError(str(e)) from e
        if raw is None:
            contacts = seed_contacts()
            logger.info("No stored contacts, installing %d defaults", len(contacts))
            self.save(contacts)
            return contacts
        try:
            return loads_contacts(raw)
        except StorageParseError:
            logger.error("Stored value under '%s' is not a contact list", self._key)
            raise

    def save(self, contacts: list[Contact]) -> None:
        """Overwrite the stored value with the full list."""
        try:
            self._prefs.set(self._key, dumps_contacts(contacts))
        except (OSError, ValueError) as e:
            logger.exception("Failed to persist %d contacts", len(contacts))
            raise StorageWriteError(str(e)) from e
