"""Add-contact flow: XState machine, message catalogue and the picker bridge."""

from trusted_contacts.flow.messages import format_message, get_messages, load_messages
from trusted_contacts.flow.picker_bridge import (
    ContactAdded,
    LaunchPicker,
    PickerAction,
    PickerBridge,
    RequestPermission,
    ShowNotice,
)
from trusted_contacts.flow.xstate_machine import PickerMachine, get_machine, load_machine

__all__ = [
    "ContactAdded",
    "LaunchPicker",
    "PickerAction",
    "PickerBridge",
    "PickerMachine",
    "RequestPermission",
    "ShowNotice",
    "format_message",
    "get_machine",
    "get_messages",
    "load_machine",
    "load_messages",
]
