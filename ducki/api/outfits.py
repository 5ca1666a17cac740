"""
Outfits API - outfits, gallery media and item membership
"""
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from ducki.api.deps import get_record_store, get_item_uploader, read_upload
from ducki.core.media_upload import MediaUploader
from ducki.services.outfit_service import outfit_service
from ducki.services.record_store import RecordStore
from ducki.schemas.item import ItemResponse
from ducki.schemas.outfit import (
    OutfitCreate,
    OutfitResponse,
    OutfitSummary,
    OutfitMediaResponse,
    OutfitDetailResponse,
    OutfitMembership,
    OutfitDeleted,
)
from typing import List
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

NOT_FOUND = "Outfit not found (or you do not have access)."


@router.get("/", response_model=List[OutfitSummary])
async def get_outfits(
    store: RecordStore = Depends(get_record_store)
):
    """
    Get outfits, newest first

    thumb_url is the legacy cover image, else the first gallery entry
    (videos as a first-frame JPEG), else null.
    """
    outfits = await outfit_service.list_outfits(store)
    return [OutfitSummary(**outfit) for outfit in outfits]


@router.post("/", response_model=OutfitResponse, status_code=201)
async def create_outfit(
    outfit_data: OutfitCreate,
    store: RecordStore = Depends(get_record_store)
):
    """Create an outfit; clients open its detail page with the returned id"""
    outfit = await outfit_service.create_outfit(store, outfit_data.name)
    return OutfitResponse.model_validate(outfit)


@router.get("/{outfit_id}", response_model=OutfitDetailResponse)
async def get_outfit(
    outfit_id: int,
    store: RecordStore = Depends(get_record_store)
):
    """Outfit with its gallery, its items and the closet items that can still be added"""
    detail = await outfit_service.get_outfit_detail(store, outfit_id)
    if not detail:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    return OutfitDetailResponse(
        outfit=OutfitResponse.model_validate(detail["outfit"]),
        cover_image_url=detail["cover_image_url"],
        media=[OutfitMediaResponse.model_validate(m) for m in detail["media"]],
        items=[ItemResponse.model_validate(i) for i in detail["items"]],
        available_items=[ItemResponse.model_validate(i) for i in detail["available_items"]],
        item_ids=detail["item_ids"],
    )


@router.delete("/{outfit_id}", response_model=OutfitDeleted)
async def delete_outfit(
    outfit_id: int,
    store: RecordStore = Depends(get_record_store)
):
    """Delete an outfit together with its item links and gallery"""
    deleted = await outfit_service.delete_outfit(store, outfit_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return OutfitDeleted(message="Outfit deleted successfully", id=outfit_id)


@router.get("/{outfit_id}/media", response_model=List[OutfitMediaResponse])
async def get_outfit_media(
    outfit_id: int,
    store: RecordStore = Depends(get_record_store)
):
    """Gallery ordered by position"""
    outfit = await outfit_service.get_outfit(store, outfit_id)
    if not outfit:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    media = await outfit_service.list_media(store, outfit_id)
    return [OutfitMediaResponse.model_validate(m) for m in media]


@router.post("/{outfit_id}/media", response_model=OutfitMediaResponse, status_code=201)
async def attach_outfit_media(
    outfit_id: int,
    file: UploadFile = File(...),
    store: RecordStore = Depends(get_record_store),
    uploader: MediaUploader = Depends(get_item_uploader)
):
    """Append a photo or video to the gallery"""
    media_file = await read_upload(file)
    if media_file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    media = await outfit_service.attach_media(store, outfit_id, uploader, media_file)
    if not media:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return OutfitMediaResponse.model_validate(media)


@router.post("/{outfit_id}/items/{item_id}", response_model=OutfitMembership, status_code=201)
async def add_item_to_outfit(
    outfit_id: int,
    item_id: int,
    store: RecordStore = Depends(get_record_store)
):
    membership = await outfit_service.add_item(store, outfit_id, item_id)
    if membership is None:
        raise HTTPException(status_code=404, detail="Outfit or item not found (or you do not have access).")
    return OutfitMembership(outfit_id=outfit_id, item_ids=membership.ids())


@router.get("/{outfit_id}/items/{item_id}", response_model=ItemResponse)
async def get_outfit_item(
    outfit_id: int,
    item_id: int,
    store: RecordStore = Depends(get_record_store)
):
    """An item opened from an outfit page; it must belong to that outfit"""
    item, error = await outfit_service.get_outfit_item(store, outfit_id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail=error)
    return ItemResponse.model_validate(item)


@router.delete("/{outfit_id}/items/{item_id}", response_model=OutfitMembership)
async def remove_item_from_outfit(
    outfit_id: int,
    item_id: int,
    store: RecordStore = Depends(get_record_store)
):
    membership = await outfit_service.remove_item(store, outfit_id, item_id)
    if membership is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return OutfitMembership(outfit_id=outfit_id, item_ids=membership.ids())
