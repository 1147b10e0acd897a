"""Domain entities: Contact, the avatar palette and the seed list."""

import random
from dataclasses import dataclass

PLACEHOLDER_NAME = "Unknown"
UNKNOWN_INITIAL = "?"

# Avatar background colors: pink, blue, purple, orange, teal, deep purple.
PALETTE = (
    "#F48FB1",
    "#90CAF9",
    "#CE93D8",
    "#FFCC80",
    "#80CBC4",
    "#B39DDB",
)


def derive_initial(name: str | None) -> str:
    """First character of the name, uppercased; "?" for an empty name."""
    if not name:
        return UNKNOWN_INITIAL
    return name[0].upper()


def pick_color(rng: random.Random | None = None) -> str:
    """Choose an avatar color uniformly from the palette."""
    return (rng or random).choice(PALETTE)


@dataclass(frozen=True)
class Contact:
    """
    A trusted contact as shown in the list and persisted in storage.
    Immutable once created; equality covers all five fields.
    """

    name: str
    number: str
    initial: str
    color_hex: str
    is_primary: bool = False

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Contact name must be non-empty.")
        if not self.number or not self.number.strip():
            raise ValueError("Contact number must be non-empty.")

    @classmethod
    def create(
        cls,
        name: str | None,
        number: str,
        rng: random.Random | None = None,
    ) -> "Contact":
        """Build a user-added contact: placeholder name, derived initial, random color."""
        display_name = (name or "").strip() or PLACEHOLDER_NAME
        return cls(
            name=display_name,
            number=number,
            initial=derive_initial(display_name),
            color_hex=pick_color(rng),
            is_primary=False,
        )


def seed_contacts() -> list[Contact]:
    """Default list installed when storage holds nothing yet."""
    return [
        Contact("Mom", "+1 (555) 123-4567", "M", "#F48FB1", True),
        Contact("Sarah Johnson", "+1 (555) 234-5678", "S", "#90CAF9", False),
        Contact("Dad", "+1 (555) 345-6789", "D", "#CE93D8", False),
    ]
