from ducki.models.user import User, Profile
from ducki.models.item import Item
from ducki.models.outfit import Outfit, OutfitMedia, OutfitItem, MediaType

__all__ = [
    "User",
    "Profile",
    "Item",
    "Outfit",
    "OutfitMedia",
    "OutfitItem",
    "MediaType",
]
