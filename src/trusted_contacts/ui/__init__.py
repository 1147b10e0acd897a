"""Presentation: list rows, avatar colors and the renderer port."""

from trusted_contacts.ui.colors import DEFAULT_AVATAR_COLOR, avatar_color, parse_color, to_hex
from trusted_contacts.ui.presenter import (
    DELETE_ACTION,
    TYPE_ADD_BUTTON,
    TYPE_CONTACT,
    AddRow,
    ContactRow,
    ListPresenter,
    Renderer,
    Row,
)

__all__ = [
    "DEFAULT_AVATAR_COLOR",
    "DELETE_ACTION",
    "TYPE_ADD_BUTTON",
    "TYPE_CONTACT",
    "AddRow",
    "ContactRow",
    "ListPresenter",
    "Renderer",
    "Row",
    "avatar_color",
    "parse_color",
    "to_hex",
]
