"""Data passed across the application boundary."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ContactDetails:
    """What the contact source reports for a picked identity."""

    display_name: str | None
    has_phone_number: bool


@dataclass(frozen=True)
class ListChange:
    """Granular hint sent to list listeners after a mutation."""

    kind: Literal["inserted", "removed"]
    index: int
