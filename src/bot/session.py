"""Per-user wiring of store, service, bridge and presenter."""

import random
from dataclasses import dataclass
from pathlib import Path

from bot.screen import PendingFrameRenderer
from bot.telegram_source import StoredPermissionAuthority, TelegramContactSource
from trusted_contacts.application import ContactService
from trusted_contacts.flow import PickerBridge, get_messages
from trusted_contacts.infrastructure import PREFS_NAME, ContactStore, JsonFileKeyValueStore
from trusted_contacts.ui import ListPresenter


@dataclass
class Session:
    service: ContactService
    bridge: PickerBridge
    presenter: ListPresenter
    renderer: PendingFrameRenderer
    permissions: StoredPermissionAuthority
    messages: dict


def open_session(
    data_dir: Path,
    user_id: int | str,
    *,
    rng: random.Random | None = None,
) -> Session:
    """Cold start for one user: load (or seed) the list and attach the presenter."""
    prefs = JsonFileKeyValueStore(Path(data_dir) / str(user_id), PREFS_NAME)
    service = ContactService.open(ContactStore(prefs), rng=rng)
    permissions = StoredPermissionAuthority(prefs)
    bridge = PickerBridge(service, TelegramContactSource(), permissions)
    renderer = PendingFrameRenderer()
    presenter = ListPresenter(service, bridge)
    presenter.attach(renderer)
    return Session(
        service=service,
        bridge=bridge,
        presenter=presenter,
        renderer=renderer,
        permissions=permissions,
        messages=get_messages(),
    )
