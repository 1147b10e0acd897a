"""
XState-compatible machine for the add-contact flow, using xstate-python.

The machine is standard XState JSON (id, initial, states with on: { EVENT: target }),
so picker_machine.json also opens in Stately Studio.
"""

import json
import os
from pathlib import Path

from xstate.machine import Machine


def get_machine_path() -> Path:
    """Return path to the picker machine JSON (PICKER_MACHINE_PATH env or bundled file)."""
    path = os.environ.get("PICKER_MACHINE_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return Path(__file__).resolve().parent / "picker_machine.json"


def load_machine(path: Path | None = None) -> dict:
    """Load machine JSON and check that every transition targets a known state."""
    config = json.loads((path or get_machine_path()).read_text(encoding="utf-8"))
    if "initial" not in config or "states" not in config:
        raise ValueError("Machine must have 'initial' and 'states'")
    states = config["states"]
    if config["initial"] not in states:
        raise ValueError(f"initial '{config['initial']}' must be a state")
    for name, node in states.items():
        for event, target in ((node or {}).get("on") or {}).items():
            if target not in states:
                raise ValueError(
                    f"State '{name}' event '{event}' targets unknown state '{target}'"
                )
    return config


class PickerMachine:
    """A loaded machine config and its xstate-python Machine."""

    def __init__(self, config: dict) -> None:
        self.config = config
        self._machine = Machine(config)

    @property
    def initial(self) -> str:
        return self.config["initial"]

    def next_state(self, state_value: str, event: str) -> str | None:
        """Target of event in state_value, or None when the state does not handle it."""
        try:
            current = self._machine.state_from(state_value)
            target = self._machine.transition(current, event).value
        except (ValueError, KeyError):
            return None
        return None if target == state_value else target


_default_machine: PickerMachine | None = None


def get_machine(cache: bool = True) -> PickerMachine:
    """Bundled (or PICKER_MACHINE_PATH) machine, loaded once by default."""
    global _default_machine
    if cache and _default_machine is not None:
        return _default_machine
    _default_machine = PickerMachine(load_machine())
    return _default_machine
