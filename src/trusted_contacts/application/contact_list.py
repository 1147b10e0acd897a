"""In-memory ordered contact list shared by the service, bridge and presenter."""

from collections.abc import Callable, Iterable, Iterator

from trusted_contacts.application.dto import ListChange
from trusted_contacts.domain import Contact

ListListener = Callable[[ListChange], None]


class ContactListState:
    """Ordered by insertion. Duplicates are allowed."""

    def __init__(self, contacts: Iterable[Contact] = ()) -> None:
        self._contacts: list[Contact] = list(contacts)
        self._listeners: list[ListListener] = []

    def __len__(self) -> int:
        return len(self._contacts)

    def __iter__(self) -> Iterator[Contact]:
        return iter(list(self._contacts))

    def __getitem__(self, index: int) -> Contact:
        return self._contacts[index]

    def snapshot(self) -> list[Contact]:
        return list(self._contacts)

    def index_of(self, contact: Contact) -> int:
        """Position of the first equal contact, or -1."""
        for i, existing in enumerate(self._contacts):
            if existing == contact:
                return i
        return -1

    def subscribe(self, listener: ListListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ListListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def append(self, contact: Contact) -> None:
        self._contacts.append(contact)
        self._notify(ListChange(kind="inserted", index=len(self._contacts) - 1))

    def remove_by_identity(self, contact: Contact) -> bool:
        """Remove the first contact equal to the given one (all fields).

        When two entries are fully identical only the first is removed.
        Returns True if something was removed.
        """
        position = self.index_of(contact)
        if position == -1:
            return False
        del self._contacts[position]
        self._notify(ListChange(kind="removed", index=position))
        return True

    def _notify(self, change: ListChange) -> None:
        for listener in list(self._listeners):
            listener(change)
