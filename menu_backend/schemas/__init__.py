from menu_backend.schemas.menu import (
    Daypart,
    Dish,
    Pairing,
    PairingRule,
    PairingSuggestion,
    UserProfile,
    Context,
)

__all__ = [
    "Daypart",
    "Dish",
    "Pairing",
    "PairingRule",
    "PairingSuggestion",
    "UserProfile",
    "Context",
]
