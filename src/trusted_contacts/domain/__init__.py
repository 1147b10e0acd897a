"""Domain layer: entities and value objects. No dependencies on outer layers."""

from trusted_contacts.domain.entities import (
    PALETTE,
    PLACEHOLDER_NAME,
    Contact,
    derive_initial,
    pick_color,
    seed_contacts,
)

__all__ = [
    "PALETTE",
    "PLACEHOLDER_NAME",
    "Contact",
    "derive_initial",
    "pick_color",
    "seed_contacts",
]
