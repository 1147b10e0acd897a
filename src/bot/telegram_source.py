"""Contact source and permission authority backed by Telegram and the user's prefs."""

from typing import Any

from telegram import Contact as TelegramContact

from trusted_contacts.application import ContactDetails, KeyValueStore
from trusted_contacts.infrastructure import StorageParseError, StorageWriteError

KEY_PERMISSION = "read_contacts_granted"


def _display_name(contact: TelegramContact) -> str | None:
    first = (contact.first_name or "").strip()
    last = (contact.last_name or "").strip()
    return f"{first} {last}".strip() or None


def vcard_numbers(vcard: str | None) -> list[str]:
    """TEL values of a vCard, in order. Handles "TEL;TYPE=CELL:..." and "item1.TEL:..."."""
    numbers = []
    for line in (vcard or "").splitlines():
        head, sep, value = line.partition(":")
        if not sep:
            continue
        prop = head.split(";", 1)[0].split(".")[-1].strip().upper()
        if prop == "TEL" and value.strip():
            numbers.append(value.strip())
    return numbers


class TelegramContactSource:
    """A shared contact card is the picked identity."""

    def lookup(self, identity: Any) -> ContactDetails | None:
        if not isinstance(identity, TelegramContact):
            return None
        return ContactDetails(
            display_name=_display_name(identity),
            has_phone_number=bool(self.phone_numbers(identity)),
        )

    def phone_numbers(self, identity: Any) -> list[str]:
        if not isinstance(identity, TelegramContact):
            return []
        numbers = []
        if identity.phone_number and identity.phone_number.strip():
            numbers.append(identity.phone_number.strip())
        for number in vcard_numbers(identity.vcard):
            if number not in numbers:
                numbers.append(number)
        return numbers


class StoredPermissionAuthority:
    """Read-contacts grant remembered in the user's preferences."""

    def __init__(self, prefs: KeyValueStore) -> None:
        self._prefs = prefs

    def is_granted(self) -> bool:
        try:
            return self._prefs.get(KEY_PERMISSION) == "true"
        except ValueError as e:
            raise StorageParseError(f"Failed to read permission: {e}") from e

    def record(self, granted: bool) -> None:
        """Persist the answer. Raises StorageWriteError if the prefs cannot be written."""
        try:
            self._prefs.set(KEY_PERMISSION, "true" if granted else "false")
        except (OSError, ValueError) as e:
            raise StorageWriteError(f"Failed to record permission: {e}") from e
