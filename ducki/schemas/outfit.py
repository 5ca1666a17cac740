"""
Outfit schemas - outfits, their media gallery and item membership
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from enum import Enum
from ducki.schemas.item import ItemResponse


class MediaTypeEnum(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class OutfitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Outfit name (e.g. Winter date night)")


class OutfitResponse(BaseModel):
    id: int
    user_id: int
    name: str
    cover_image_url: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class OutfitSummary(OutfitResponse):
    """Outfit list entry with its derived thumbnail"""
    thumb_url: Optional[str] = None
    thumb_type: Optional[MediaTypeEnum] = None


class OutfitMediaResponse(BaseModel):
    id: int
    outfit_id: int
    user_id: int
    media_url: str
    media_type: MediaTypeEnum
    position: int
    created_at: datetime

    model_config = {"from_attributes": True}


class OutfitDetailResponse(BaseModel):
    outfit: OutfitResponse
    cover_image_url: Optional[str] = None
    media: List[OutfitMediaResponse]
    items: List[ItemResponse] = Field(..., description="Items in this outfit")
    available_items: List[ItemResponse] = Field(..., description="Closet items not in this outfit")
    item_ids: List[int]


class OutfitMembership(BaseModel):
    outfit_id: int
    item_ids: List[int]


class OutfitDeleted(BaseModel):
    message: str
    id: int
