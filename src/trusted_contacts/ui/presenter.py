"""List presenter: contact rows plus one trailing "add" row."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from trusted_contacts.application import ContactListState, ContactService, ListChange
from trusted_contacts.domain import Contact
from trusted_contacts.flow import PickerAction, PickerBridge
from trusted_contacts.ui.colors import avatar_color

logger = logging.getLogger(__name__)

TYPE_CONTACT = 0
TYPE_ADD_BUTTON = 1

DELETE_ACTION = "Delete"


@dataclass(frozen=True)
class ContactRow:
    position: int
    contact: Contact
    name: str
    number: str
    initial: str
    show_primary_badge: bool
    avatar_color: int
    actions: tuple[str, ...] = field(default=(DELETE_ACTION,))


@dataclass(frozen=True)
class AddRow:
    position: int


Row = ContactRow | AddRow


class Renderer(Protocol):
    """Draws the rows. change is a hint; the full row list is always given."""

    def render(self, rows: list[Row], change: ListChange | None) -> None:
        ...


class ListPresenter:
    """Renders the list state and dispatches row intents to the service and bridge."""

    def __init__(
        self,
        service: ContactService,
        bridge: PickerBridge,
        renderer: Renderer | None = None,
    ) -> None:
        self._service = service
        self._bridge = bridge
        self._renderer = renderer

    @property
    def _state(self) -> ContactListState:
        return self._service.state

    def attach(self, renderer: Renderer | None = None) -> None:
        """Start re-rendering on every list change and draw the first frame."""
        if renderer is not None:
            self._renderer = renderer
        self._state.subscribe(self._on_list_changed)
        self._render(None)

    def detach(self) -> None:
        self._state.unsubscribe(self._on_list_changed)

    def item_count(self) -> int:
        return len(self._state) + 1

    def item_view_type(self, position: int) -> int:
        return TYPE_CONTACT if position < len(self._state) else TYPE_ADD_BUTTON

    def rows(self) -> list[Row]:
        out: list[Row] = []
        for position, contact in enumerate(self._state):
            out.append(
                ContactRow(
                    position=position,
                    contact=contact,
                    name=contact.name,
                    number=contact.number,
                    initial=contact.initial,
                    show_primary_badge=contact.is_primary,
                    avatar_color=avatar_color(contact.color_hex),
                )
            )
        out.append(AddRow(position=len(out)))
        return out

    def on_add_clicked(self) -> list[PickerAction]:
        return self._bridge.request_add()

    def on_row_action(self, position: int, title: str) -> bool:
        """Context menu action on a contact row. Returns True if the list changed."""
        if title != DELETE_ACTION:
            return False
        if not 0 <= position < len(self._state):
            logger.warning("Delete on row %d ignored, list has %d contacts", position, len(self._state))
            return False
        return self.on_delete(self._state[position])

    def on_delete(self, contact: Contact) -> bool:
        return self._service.delete_contact(contact)

    def _on_list_changed(self, change: ListChange) -> None:
        self._render(change)

    def _render(self, change: ListChange | None) -> None:
        if self._renderer is not None:
            self._renderer.render(self.rows(), change)
