from ducki.schemas.auth import (
    Token,
    SignUpRequest,
    SignInRequest,
    RefreshTokenRequest,
    PasswordUpdate,
    UserResponse,
    AuthResponse,
    MessageResponse,
)
from ducki.schemas.item import (
    ItemForm,
    ItemResponse,
    ItemEditForm,
    ClosetFilters,
    ClosetResponse,
    ItemCreated,
    ItemDeleted,
    CategoryOptions,
)
from ducki.schemas.outfit import (
    MediaTypeEnum,
    OutfitCreate,
    OutfitResponse,
    OutfitSummary,
    OutfitMediaResponse,
    OutfitDetailResponse,
    OutfitMembership,
    OutfitDeleted,
)
from ducki.schemas.profile import ProfileResponse

__all__ = [
    "Token",
    "SignUpRequest",
    "SignInRequest",
    "RefreshTokenRequest",
    "PasswordUpdate",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    "ItemForm",
    "ItemResponse",
    "ItemEditForm",
    "ClosetFilters",
    "ClosetResponse",
    "ItemCreated",
    "ItemDeleted",
    "CategoryOptions",
    "MediaTypeEnum",
    "OutfitCreate",
    "OutfitResponse",
    "OutfitSummary",
    "OutfitMediaResponse",
    "OutfitDetailResponse",
    "OutfitMembership",
    "OutfitDeleted",
    "ProfileResponse",
]
