"""Load the YAML message catalogue used for notices and the Telegram screen."""

import os
from pathlib import Path

import yaml


def get_messages_path() -> Path:
    """Return path to the messages YAML (MESSAGES_PATH env or bundled file)."""
    default = Path(__file__).resolve().parent / "messages.yaml"
    path = os.environ.get("MESSAGES_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return default


def load_messages(path: Path | None = None) -> dict[str, str]:
    """Load messages YAML and return the id -> text mapping."""
    if path is None:
        path = get_messages_path()
    raw = path.read_text(encoding="utf-8")
    doc = yaml.safe_load(raw)
    if not isinstance(doc, dict):
        raise ValueError("Messages YAML must be a dict")
    messages = doc.get("messages")
    if not isinstance(messages, dict):
        raise ValueError("Messages YAML must have a 'messages' mapping")
    for key, text in messages.items():
        if not isinstance(text, str):
            raise ValueError(f"Message '{key}' must be a string")
    return messages


def format_message(messages: dict, message_id: str, template_vars: dict | None = None) -> str:
    text = messages.get(message_id) or message_id
    for k, v in (template_vars or {}).items():
        text = text.replace("{" + k + "}", str(v) if v is not None else "")
    return text


# Module-level cache for loaded messages
_messages_cache: dict | None = None


def get_messages(cache: bool = True) -> dict[str, str]:
    """Load messages (cached by default). Pass cache=False to reload."""
    global _messages_cache
    if cache and _messages_cache is not None:
        return _messages_cache
    _messages_cache = load_messages()
    return _messages_cache
