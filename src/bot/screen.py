"""Render presenter rows as a Telegram message with an inline keyboard."""

from dataclasses import dataclass

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from trusted_contacts.application import ListChange
from trusted_contacts.flow import format_message
from trusted_contacts.ui import AddRow, ContactRow, Row
from trusted_contacts.ui.colors import rgb

CB_ADD = "add"
CB_ROW = "row"
CB_DELETE = "del"
CB_MENU_CANCEL = "menu_cancel"
CB_PERMISSION = "perm"

PRIMARY_BADGE = "⭐"

# Colored circles Telegram can show, with the RGB they are drawn in.
_AVATAR_EMOJI = (
    ("🔴", (0xDD, 0x2E, 0x44)),
    ("🟠", (0xF4, 0x90, 0x0C)),
    ("🟡", (0xFD, 0xCB, 0x58)),
    ("🟢", (0x78, 0xB1, 0x59)),
    ("🔵", (0x55, 0xAC, 0xEE)),
    ("🟣", (0xAA, 0x8E, 0xD6)),
    ("🟤", (0xC1, 0x69, 0x4F)),
    ("⚫", (0x31, 0x37, 0x3D)),
    ("⚪", (0xE6, 0xE7, 0xE8)),
)


def avatar_emoji(color: int) -> str:
    """Closest colored circle to an ARGB color."""
    r, g, b = rgb(color)

    def distance(entry):
        er, eg, eb = entry[1]
        return (r - er) ** 2 + (g - eg) ** 2 + (b - eb) ** 2

    return min(_AVATAR_EMOJI, key=distance)[0]


def _row_label(row: ContactRow) -> str:
    label = f"{avatar_emoji(row.avatar_color)} {row.name}"
    if row.show_primary_badge:
        label = f"{label} {PRIMARY_BADGE}"
    return label


def screen_text(rows: list[Row], messages: dict) -> str:
    lines = [format_message(messages, "screen_title")]
    contact_rows = [r for r in rows if isinstance(r, ContactRow)]
    if not contact_rows:
        lines.append(format_message(messages, "screen_empty"))
    for row in contact_rows:
        badge = f" {PRIMARY_BADGE} Primary" if row.show_primary_badge else ""
        lines.append(f"{avatar_emoji(row.avatar_color)} {row.initial}  {row.name}{badge}\n      {row.number}")
    return "\n\n".join(lines)


def screen_keyboard(rows: list[Row], messages: dict) -> InlineKeyboardMarkup:
    buttons = []
    for row in rows:
        if isinstance(row, ContactRow):
            buttons.append(
                [InlineKeyboardButton(_row_label(row), callback_data=f"{CB_ROW}:{row.position}")]
            )
        elif isinstance(row, AddRow):
            buttons.append(
                [InlineKeyboardButton(format_message(messages, "add_button"), callback_data=CB_ADD)]
            )
    return InlineKeyboardMarkup(buttons)


def row_menu_keyboard(row: ContactRow, messages: dict) -> InlineKeyboardMarkup:
    """Context menu for one contact row: its actions plus Cancel."""
    buttons = [
        InlineKeyboardButton(
            format_message(messages, "delete_action") if action == "Delete" else action,
            callback_data=f"{CB_DELETE}:{row.position}",
        )
        for action in row.actions
    ]
    buttons.append(
        InlineKeyboardButton(format_message(messages, "cancel_action"), callback_data=CB_MENU_CANCEL)
    )
    return InlineKeyboardMarkup([buttons])


def permission_keyboard(request_id: str, messages: dict) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(
                    format_message(messages, "permission_allow"),
                    callback_data=f"{CB_PERMISSION}:{request_id}:allow",
                ),
                InlineKeyboardButton(
                    format_message(messages, "permission_deny"),
                    callback_data=f"{CB_PERMISSION}:{request_id}:deny",
                ),
            ]
        ]
    )


def parse_callback(data: str | None) -> dict | None:
    """Map callback data to an intent dict, or None if it is not ours."""
    data = (data or "").strip()
    if data == CB_ADD:
        return {"type": "add"}
    if data == CB_MENU_CANCEL:
        return {"type": "menu_cancel"}
    kind, sep, rest = data.partition(":")
    if not sep:
        return None
    if kind in (CB_ROW, CB_DELETE):
        try:
            position = int(rest)
        except ValueError:
            return None
        return {"type": "row" if kind == CB_ROW else "delete", "position": position}
    if kind == CB_PERMISSION:
        request_id, sep, answer = rest.rpartition(":")
        if not sep or not request_id or answer not in ("allow", "deny"):
            return None
        return {"type": "permission", "request_id": request_id, "granted": answer == "allow"}
    return None


@dataclass
class Frame:
    rows: list[Row]
    change: ListChange | None


class PendingFrameRenderer:
    """Keeps the latest frame until the handler sends it to the chat."""

    def __init__(self) -> None:
        self._frame: Frame | None = None

    def render(self, rows: list[Row], change: ListChange | None) -> None:
        self._frame = Frame(rows=rows, change=change)

    def take(self) -> Frame | None:
        frame, self._frame = self._frame, None
        return frame
