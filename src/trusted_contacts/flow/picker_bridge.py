"""
Picker bridge: permission check, contact picker and phone lookup for one "add".

The flow is the XState machine in picker_machine.json. The bridge maps user
intents and asynchronous completions to machine events, runs the effect of
each state it enters and returns actions for the host to perform (show a
permission prompt, open the picker, show a notice). Completions carry the
request id of the "add" that started them; anything else is ignored.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from trusted_contacts.application import (
    ContactService,
    ContactSource,
    PermissionAuthority,
)
from trusted_contacts.domain import Contact
from trusted_contacts.flow.messages import format_message, get_messages
from trusted_contacts.flow.xstate_machine import PickerMachine, get_machine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestPermission:
    request_id: str


@dataclass(frozen=True)
class LaunchPicker:
    request_id: str


@dataclass(frozen=True)
class ShowNotice:
    message_id: str
    text: str


@dataclass(frozen=True)
class ContactAdded:
    contact: Contact


PickerAction = RequestPermission | LaunchPicker | ShowNotice | ContactAdded

WAITING_STATES = frozenset({"idle", "awaiting_permission", "awaiting_pick"})
# Upper bound on effect states run for one event
MAX_EFFECT_STEPS = 20


class PickerBridge:
    """One add flow at a time; a new add abandons a pending one."""

    def __init__(
        self,
        service: ContactService,
        contact_source: ContactSource,
        permissions: PermissionAuthority,
        *,
        machine: PickerMachine | None = None,
        messages: dict | None = None,
    ) -> None:
        self._service = service
        self._source = contact_source
        self._permissions = permissions
        self._machine = machine if machine is not None else get_machine()
        self._messages = messages if messages is not None else get_messages()
        self._state_value: str = self._machine.initial
        self._request_id: str | None = None

    @property
    def state(self) -> str:
        return self._state_value

    @property
    def request_id(self) -> str | None:
        """Id of the add flow waiting for a completion, or None when idle."""
        return self._request_id

    def request_add(self) -> list[PickerAction]:
        """User tapped "add". Starts a new flow with a fresh request id."""
        if self._request_id is not None:
            logger.info("Abandoning pending add request %s", self._request_id)
        self._request_id = str(uuid.uuid4())
        return self._run("ADD_REQUESTED", {})

    def on_permission_result(self, request_id: str, granted: bool) -> list[PickerAction]:
        """Completion of a RequestPermission action."""
        if not self._accepts(request_id, "awaiting_permission"):
            return []
        event = "PERMISSION_GRANTED" if granted else "PERMISSION_DENIED"
        return self._run(event, {})

    def on_contact_picked(self, request_id: str, identity: Any | None) -> list[PickerAction]:
        """Completion of a LaunchPicker action. identity is None when the user cancelled."""
        if not self._accepts(request_id, "awaiting_pick"):
            return []
        if identity is None:
            return self._run("PICK_CANCELLED", {})
        return self._run("CONTACT_PICKED", {"identity": identity})

    def _accepts(self, request_id: str, waiting_state: str) -> bool:
        if request_id != self._request_id:
            logger.warning(
                "Ignoring completion for stale request %s (current %s)",
                request_id,
                self._request_id,
            )
            return False
        if self._state_value != waiting_state:
            logger.warning(
                "Ignoring completion for request %s in state %s",
                request_id,
                self._state_value,
            )
            return False
        return True

    def _notice(self, message_id: str, template_vars: dict | None = None) -> ShowNotice:
        return ShowNotice(
            message_id=message_id,
            text=format_message(self._messages, message_id, template_vars),
        )

    def _run_effect(self, state_value: str, payload: dict) -> tuple[list[PickerAction], str | None]:
        """
        Run effect for state_value. Return (actions, outcome_event).
        outcome_event is the machine event to send next.
        """
        actions: list[PickerAction] = []

        if state_value == "checking_permission":
            return actions, "GRANTED" if self._permissions.is_granted() else "NOT_GRANTED"

        if state_value == "requesting_permission":
            actions.append(RequestPermission(request_id=self._request_id))
            return actions, "REQUESTED"

        if state_value == "permission_denied":
            actions.append(self._notice("permission_denied"))
            return actions, "DONE"

        if state_value == "launching_picker":
            actions.append(LaunchPicker(request_id=self._request_id))
            return actions, "LAUNCHED"

        if state_value == "resolving":
            identity = payload.get("identity")
            details = self._source.lookup(identity)
            if details is None:
                return actions, "NOT_FOUND"
            if not details.has_phone_number:
                actions.append(self._notice("no_phone_number"))
                return actions, "NO_PHONE_NUMBER"
            numbers = self._source.phone_numbers(identity)
            number = (numbers[0] if numbers else "") or ""
            if not number.strip():
                actions.append(self._notice("no_phone_number_found"))
                return actions, "NO_NUMBER_FOUND"
            contact = self._service.add_contact(details.display_name, number)
            actions.append(ContactAdded(contact=contact))
            return actions, "ADDED"

        return actions, None

    def _run(self, event: str, payload: dict) -> list[PickerAction]:
        """Transition with event, then run effects until a waiting state is reached."""
        all_actions: list[PickerAction] = []
        current = self._state_value
        xevent: str | None = event
        steps = 0
        while xevent is not None and steps < MAX_EFFECT_STEPS:
            steps += 1
            next_state = self._machine.next_state(current, xevent)
            if next_state is None:
                logger.warning("No transition from %s on %s", current, xevent)
                break
            current = next_state
            if current in WAITING_STATES:
                break
            try:
                effect_actions, xevent = self._run_effect(current, payload)
            except Exception:
                # A failed effect (e.g. a storage write) ends the flow.
                self._state_value = self._machine.initial
                self._request_id = None
                raise
            all_actions.extend(effect_actions)
        self._state_value = current
        if current == "idle":
            self._request_id = None
        return all_actions
