"""Telegram handlers driven with locally built updates and a recording bot."""

import asyncio
from types import SimpleNamespace

from telegram import Update

from bot.__main__ import (
    DATA_DIR_KEY,
    cancel,
    handle_callback,
    handle_contact,
    show_list,
)
from bot.session import open_session
from bot.telegram_source import StoredPermissionAuthority
from trusted_contacts.flow import format_message, load_messages
from trusted_contacts.infrastructure import PREFS_NAME, JsonFileKeyValueStore

USER_ID = 1
CHAT_ID = 123
MESSAGES = load_messages()


class RecordingBot:
    """Stands in for telegram.Bot: keeps what would have been sent."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.answered: list[str] = []
        self._next_id = 100

    async def send_message(self, chat_id, text, reply_markup=None, **kwargs):
        self._next_id += 1
        self.sent.append(
            {"chat_id": chat_id, "text": text, "reply_markup": reply_markup, "message_id": self._next_id}
        )
        return SimpleNamespace(message_id=self._next_id)

    async def answer_callback_query(self, callback_query_id, **kwargs):
        self.answered.append(callback_query_id)
        return True

    def texts(self) -> list[str]:
        return [m["text"] for m in self.sent]


def _context(tmp_path):
    return SimpleNamespace(bot=RecordingBot(), bot_data={DATA_DIR_KEY: tmp_path}, user_data={})


def _command(text: str) -> Update:
    body = {
        "update_id": 1,
        "message": {
            "message_id": 1,
            "from": {"id": USER_ID, "is_bot": False, "first_name": "U"},
            "chat": {"id": CHAT_ID, "type": "private"},
            "date": 1,
            "text": text,
        },
    }
    return Update.de_json(body, None)


def _tap(data: str, message_id: int = 1) -> Update:
    body = {
        "update_id": 2,
        "callback_query": {
            "id": f"cq-{data}",
            "from": {"id": USER_ID, "is_bot": False, "first_name": "U"},
            "message": {
                "message_id": message_id,
                "chat": {"id": CHAT_ID, "type": "private"},
                "date": 1,
            },
            "chat_instance": "x",
            "data": data,
        },
    }
    return Update.de_json(body, None)


def _shared_contact(first_name: str, phone_number: str) -> Update:
    body = {
        "update_id": 3,
        "message": {
            "message_id": 5,
            "from": {"id": USER_ID, "is_bot": False, "first_name": "U"},
            "chat": {"id": CHAT_ID, "type": "private"},
            "date": 1,
            "contact": {"phone_number": phone_number, "first_name": first_name, "user_id": 42},
        },
    }
    return Update.de_json(body, None)


def _run(handler, update, context) -> None:
    asyncio.run(handler(update, context))


def _callback_data(markup) -> list[str]:
    return [button.callback_data for line in markup.inline_keyboard for button in line]


def _stored_names(tmp_path) -> list[str]:
    return [c.name for c in open_session(tmp_path, USER_ID).service.list_contacts()]


def _prefs(tmp_path) -> JsonFileKeyValueStore:
    return JsonFileKeyValueStore(tmp_path / str(USER_ID), PREFS_NAME)


def _request_id(context) -> str:
    """Request id carried by the last permission prompt sent."""
    prompt = [m for m in context.bot.sent if m["text"] == format_message(MESSAGES, "permission_prompt")][-1]
    return _callback_data(prompt["reply_markup"])[0].split(":")[1]


def test_list_command_sends_screen(tmp_path) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/list"), context)
    assert len(context.bot.sent) == 1
    screen = context.bot.sent[0]
    assert screen["chat_id"] == CHAT_ID
    assert screen["text"].startswith(format_message(MESSAGES, "screen_title"))
    assert _callback_data(screen["reply_markup"]) == ["row:0", "row:1", "row:2", "add"]


def test_delete_removes_contact_of_tapped_menu_not_last_opened(tmp_path) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/start"), context)
    _run(handle_callback, _tap("row:0"), context)
    mom_menu = context.bot.sent[-1]
    _run(handle_callback, _tap("row:2"), context)
    dad_menu = context.bot.sent[-1]
    assert _callback_data(mom_menu["reply_markup"]) == ["del:0", "menu_cancel"]
    assert _callback_data(dad_menu["reply_markup"]) == ["del:2", "menu_cancel"]

    _run(handle_callback, _tap("del:0", mom_menu["message_id"]), context)

    assert format_message(MESSAGES, "contact_deleted", {"name": "Mom"}) in context.bot.texts()
    assert _stored_names(tmp_path) == ["Sarah Johnson", "Dad"]

    # Dad's menu still deletes Dad even though his position moved.
    _run(handle_callback, _tap("del:2", dad_menu["message_id"]), context)
    assert format_message(MESSAGES, "contact_deleted", {"name": "Dad"}) in context.bot.texts()
    assert _stored_names(tmp_path) == ["Sarah Johnson"]


def test_delete_from_unknown_menu_uses_row_position_and_notifies(tmp_path) -> None:
    context = _context(tmp_path)
    _run(handle_callback, _tap("del:1", message_id=999), context)
    assert format_message(MESSAGES, "contact_deleted", {"name": "Sarah Johnson"}) in context.bot.texts()
    assert _stored_names(tmp_path) == ["Mom", "Dad"]
    # The list changed, so the screen is sent again.
    assert context.bot.texts()[-1].startswith(format_message(MESSAGES, "screen_title"))


def test_menu_cancel_forgets_menu_and_keeps_list(tmp_path) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/start"), context)
    _run(handle_callback, _tap("row:0"), context)
    menu = context.bot.sent[-1]
    _run(handle_callback, _tap("menu_cancel", menu["message_id"]), context)
    assert _stored_names(tmp_path) == ["Mom", "Sarah Johnson", "Dad"]
    assert context.user_data["menu_contacts"] == {}


def test_shared_contact_while_awaiting_pick_is_added_and_persisted(tmp_path) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/start"), context)
    _run(handle_callback, _tap("add"), context)
    request_id = _request_id(context)
    _run(handle_callback, _tap(f"perm:{request_id}:allow"), context)
    assert context.bot.texts()[-1] == format_message(MESSAGES, "picker_prompt")
    assert StoredPermissionAuthority(_prefs(tmp_path)).is_granted()

    _run(handle_contact, _shared_contact("Alice", "+1 555 0100"), context)

    assert format_message(MESSAGES, "contact_added", {"name": "Alice"}) in context.bot.texts()
    assert _stored_names(tmp_path) == ["Mom", "Sarah Johnson", "Dad", "Alice"]
    assert context.bot_data["sessions"][USER_ID].bridge.state == "idle"


def test_shared_contact_without_pending_add_is_not_added(tmp_path) -> None:
    context = _context(tmp_path)
    _run(handle_contact, _shared_contact("Alice", "+1 555 0100"), context)
    assert context.bot.texts() == [format_message(MESSAGES, "unsupported")]
    assert _stored_names(tmp_path) == ["Mom", "Sarah Johnson", "Dad"]


def test_stale_allow_tap_does_not_record_grant(tmp_path) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/start"), context)
    _run(handle_callback, _tap("add"), context)
    first = _request_id(context)
    _run(handle_callback, _tap("add"), context)
    second = _request_id(context)
    assert first != second

    _run(handle_callback, _tap(f"perm:{first}:allow"), context)
    assert not StoredPermissionAuthority(_prefs(tmp_path)).is_granted()
    assert context.bot_data["sessions"][USER_ID].bridge.state == "awaiting_permission"

    _run(handle_callback, _tap(f"perm:{second}:allow"), context)
    assert StoredPermissionAuthority(_prefs(tmp_path)).is_granted()
    assert context.bot_data["sessions"][USER_ID].bridge.state == "awaiting_pick"


def test_deny_is_not_recorded(tmp_path) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/start"), context)
    _run(handle_callback, _tap("add"), context)
    _run(handle_callback, _tap(f"perm:{_request_id(context)}:deny"), context)
    assert context.bot.texts()[-1] == format_message(MESSAGES, "permission_denied")
    assert _prefs(tmp_path).get("read_contacts_granted") is None


def test_cancel_command_ends_pick_and_shows_screen(tmp_path) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/start"), context)
    _run(handle_callback, _tap("add"), context)
    _run(handle_callback, _tap(f"perm:{_request_id(context)}:allow"), context)
    session = context.bot_data["sessions"][USER_ID]
    assert session.bridge.state == "awaiting_pick"

    _run(cancel, _command("/cancel"), context)

    assert session.bridge.state == "idle"
    assert session.bridge.request_id is None
    assert context.bot.texts()[-1].startswith(format_message(MESSAGES, "screen_title"))
    # A card shared after cancelling is not taken as a pick.
    _run(handle_contact, _shared_contact("Alice", "+1 555 0100"), context)
    assert context.bot.texts()[-1] == format_message(MESSAGES, "unsupported")


def test_unreadable_prefs_file_is_reported_and_left_alone(tmp_path) -> None:
    user_dir = tmp_path / str(USER_ID)
    user_dir.mkdir()
    prefs_file = user_dir / "TrustedContactsPrefs.json"
    prefs_file.write_text("{oops", encoding="utf-8")
    context = _context(tmp_path)

    _run(show_list, _command("/list"), context)

    assert context.bot.texts() == [format_message(MESSAGES, "storage_unreadable")]
    assert prefs_file.read_text(encoding="utf-8") == "{oops"
    assert USER_ID not in context.bot_data["sessions"]


def test_failed_write_on_delete_is_reported(tmp_path, monkeypatch) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/list"), context)

    def failing_set(self, key, value):
        raise OSError("disk full")

    monkeypatch.setattr(JsonFileKeyValueStore, "set", failing_set)
    _run(handle_callback, _tap("del:0", message_id=999), context)

    assert context.bot.texts()[-1] == format_message(MESSAGES, "storage_error")
    monkeypatch.undo()
    assert _stored_names(tmp_path) == ["Mom", "Sarah Johnson", "Dad"]


def test_failed_permission_write_is_reported_and_prompt_stays_open(tmp_path, monkeypatch) -> None:
    context = _context(tmp_path)
    _run(show_list, _command("/start"), context)
    _run(handle_callback, _tap("add"), context)
    request_id = _request_id(context)

    def failing_set(self, key, value):
        raise OSError("read-only file system")

    monkeypatch.setattr(JsonFileKeyValueStore, "set", failing_set)
    _run(handle_callback, _tap(f"perm:{request_id}:allow"), context)

    assert context.bot.texts()[-1] == format_message(MESSAGES, "storage_error")
    session = context.bot_data["sessions"][USER_ID]
    assert session.bridge.state == "awaiting_permission"
    monkeypatch.undo()
    _run(handle_callback, _tap(f"perm:{request_id}:allow"), context)
    assert context.bot.texts()[-1] == format_message(MESSAGES, "picker_prompt")
