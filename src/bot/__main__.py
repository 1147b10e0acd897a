"""
Trusted contacts bot: the list screen, delete menu and add flow over Telegram.
Run: python -m bot (from repo root, with .env or env vars set).
"""
import logging

from bot.config import load_env, load_settings

load_env()

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from bot.screen import (
    permission_keyboard,
    parse_callback,
    row_menu_keyboard,
    screen_keyboard,
    screen_text,
)
from bot.session import Session, open_session
from trusted_contacts.flow import (
    ContactAdded,
    LaunchPicker,
    RequestPermission,
    ShowNotice,
    format_message,
    get_messages,
)
from trusted_contacts.infrastructure import ContactStoreError
from trusted_contacts.ui import ContactRow

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

SESSIONS_KEY = "sessions"
DATA_DIR_KEY = "data_dir"
# message_id of an open row menu -> the contact it was opened for
MENU_CONTACTS_KEY = "menu_contacts"


async def _reply(update: Update, context: ContextTypes.DEFAULT_TYPE, text: str, reply_markup=None):
    return await context.bot.send_message(
        chat_id=update.effective_chat.id, text=text, reply_markup=reply_markup
    )


async def _get_session(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> Session | None:
    """Cached session for the user; None (after telling the user) if storage is unreadable."""
    sessions: dict[int, Session] = context.bot_data.setdefault(SESSIONS_KEY, {})
    user_id = update.effective_user.id
    if user_id not in sessions:
        try:
            sessions[user_id] = open_session(context.bot_data[DATA_DIR_KEY], user_id)
        except ContactStoreError:
            logger.exception("Could not load contacts for user %s", user_id)
            await _reply(update, context, format_message(get_messages(), "storage_unreadable"))
            return None
    return sessions[user_id]


async def _send_screen(update: Update, context: ContextTypes.DEFAULT_TYPE, session: Session) -> None:
    rows = session.presenter.rows()
    await _reply(
        update,
        context,
        screen_text(rows, session.messages),
        reply_markup=screen_keyboard(rows, session.messages),
    )


async def _flush(update: Update, context: ContextTypes.DEFAULT_TYPE, session: Session) -> None:
    """Send the screen again if the list changed while handling this update."""
    if session.renderer.take() is not None:
        await _send_screen(update, context, session)


async def _perform(
    update: Update, context: ContextTypes.DEFAULT_TYPE, session: Session, actions: list
) -> None:
    for action in actions:
        if isinstance(action, RequestPermission):
            await _reply(
                update,
                context,
                format_message(session.messages, "permission_prompt"),
                reply_markup=permission_keyboard(action.request_id, session.messages),
            )
        elif isinstance(action, LaunchPicker):
            await _reply(update, context, format_message(session.messages, "picker_prompt"))
        elif isinstance(action, ShowNotice):
            await _reply(update, context, action.text)
        elif isinstance(action, ContactAdded):
            await _reply(
                update,
                context,
                format_message(session.messages, "contact_added", {"name": action.contact.name}),
            )


async def _storage_failed(update: Update, context: ContextTypes.DEFAULT_TYPE, session: Session) -> None:
    logger.exception("Storage failure for user %s", update.effective_user.id)
    await _reply(update, context, format_message(session.messages, "storage_error"))


def _menu_contact(update: Update, context: ContextTypes.DEFAULT_TYPE, session: Session, position: int):
    """Contact of the row menu that was tapped; falls back to the row at position."""
    menus: dict = context.user_data.setdefault(MENU_CONTACTS_KEY, {})
    message = update.callback_query.message
    if message is not None and message.message_id in menus:
        return menus.pop(message.message_id)
    if 0 <= position < len(session.service.state):
        return session.service.state[position]
    return None


async def show_list(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = await _get_session(update, context)
    if session is None:
        return
    session.renderer.take()
    await _send_screen(update, context, session)


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    await context.bot.answer_callback_query(callback_query_id=query.id)
    intent = parse_callback(query.data)
    if intent is None:
        logger.warning("Unknown callback data %r", query.data)
        return
    session = await _get_session(update, context)
    if session is None:
        return
    try:
        if intent["type"] == "add":
            await _perform(update, context, session, session.presenter.on_add_clicked())
        elif intent["type"] == "row":
            rows = session.presenter.rows()
            position = intent["position"]
            if 0 <= position < len(rows) and isinstance(rows[position], ContactRow):
                row = rows[position]
                sent = await _reply(
                    update,
                    context,
                    format_message(session.messages, "row_menu", {"name": row.name}),
                    reply_markup=row_menu_keyboard(row, session.messages),
                )
                context.user_data.setdefault(MENU_CONTACTS_KEY, {})[sent.message_id] = row.contact
        elif intent["type"] == "delete":
            contact = _menu_contact(update, context, session, intent["position"])
            if contact is not None and session.presenter.on_delete(contact):
                await _reply(
                    update,
                    context,
                    format_message(session.messages, "contact_deleted", {"name": contact.name}),
                )
        elif intent["type"] == "menu_cancel":
            if query.message is not None:
                context.user_data.setdefault(MENU_CONTACTS_KEY, {}).pop(query.message.message_id, None)
        elif intent["type"] == "permission":
            bridge = session.bridge
            accepted = bridge.state == "awaiting_permission" and bridge.request_id == intent["request_id"]
            if accepted and intent["granted"]:
                session.permissions.record(True)
            actions = bridge.on_permission_result(intent["request_id"], intent["granted"])
            await _perform(update, context, session, actions)
    except ContactStoreError:
        await _storage_failed(update, context, session)
        return
    await _flush(update, context, session)


async def handle_contact(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """A shared contact card completes a pending picker request."""
    session = await _get_session(update, context)
    if session is None:
        return
    if session.bridge.state != "awaiting_pick":
        await _reply(update, context, format_message(session.messages, "unsupported"))
        return
    try:
        actions = session.bridge.on_contact_picked(
            session.bridge.request_id, update.message.contact
        )
        await _perform(update, context, session, actions)
    except ContactStoreError:
        await _storage_failed(update, context, session)
        return
    await _flush(update, context, session)


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = await _get_session(update, context)
    if session is None:
        return
    if session.bridge.state == "awaiting_pick":
        session.bridge.on_contact_picked(session.bridge.request_id, None)
    await _send_screen(update, context, session)


async def other_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = await _get_session(update, context)
    if session is None:
        return
    await _reply(update, context, format_message(session.messages, "unsupported"))


def main() -> None:
    settings = load_settings()
    app = Application.builder().token(settings.token).build()
    app.bot_data[DATA_DIR_KEY] = settings.data_dir
    app.add_handler(CommandHandler(["start", "list"], show_list))
    app.add_handler(CommandHandler("cancel", cancel))
    app.add_handler(CallbackQueryHandler(handle_callback))
    app.add_handler(MessageHandler(filters.CONTACT, handle_contact))
    app.add_handler(MessageHandler(~filters.COMMAND & ~filters.CONTACT, other_message))
    logger.info("Bot running (polling). Data dir: %s", settings.data_dir)
    app.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
