"""
Items API - the user's closet
"""
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, Query
from pydantic import ValidationError
from ducki.api.deps import get_record_store, get_item_uploader, read_upload, validation_detail
from ducki.core.media_upload import MediaUploader
from ducki.services.closet_view import ALL, SORT_ORDERS, filter_options, visible_items
from ducki.services.item_service import item_service
from ducki.services.record_store import RecordStore
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
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

NOT_FOUND = "Item not found (or you do not have access)."


def _build_form(name: str, category: str, category_other: Optional[str], brand: Optional[str]) -> ItemForm:
    try:
        return ItemForm(name=name, category=category, category_other=category_other, brand=brand)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=validation_detail(e))


@router.get("/", response_model=ClosetResponse)
async def get_closet(
    search: str = Query("", description="Case-insensitive match on item name"),
    category: str = Query(ALL, description="Exact category or All"),
    brand: str = Query(ALL, description="Exact brand or All"),
    sort: str = Query("newest", description="newest or oldest"),
    store: RecordStore = Depends(get_record_store)
):
    """
    Get the closet with search/filter/sort applied

    Dropdown choices (categories, brands) come from the whole closet,
    not just the visible items.
    """
    if sort not in SORT_ORDERS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid sort. Must be one of: {list(SORT_ORDERS)}"
        )

    items = await item_service.list_items(store)
    visible = visible_items(items, search=search, category=category, brand=brand, sort=sort)
    options = filter_options(items)

    return ClosetResponse(
        items=[ItemResponse.model_validate(item) for item in visible],
        total=len(items),
        categories=options["categories"],
        brands=options["brands"],
        filters=ClosetFilters(search=search, category=category, brand=brand, sort=sort),
    )


@router.get("/categories", response_model=CategoryOptions)
async def get_category_options():
    """Category choices for the item forms"""
    return CategoryOptions()


@router.post("/", response_model=ItemCreated, status_code=201)
async def create_item(
    name: str = Form(...),
    category: str = Form("Tops"),
    category_other: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    store: RecordStore = Depends(get_record_store),
    uploader: MediaUploader = Depends(get_item_uploader)
):
    """
    Create an item (multipart form)

    - name: Item name (required)
    - category: One of the category options (default Tops)
    - category_other: Custom category, required when category is Other
    - brand: Brand (optional)
    - file: Photo (optional). Uploaded first; if it fails no item is created
    """
    form = _build_form(name, category, category_other, brand)
    image = await read_upload(file)

    item, items = await item_service.create_item(store, form, uploader, image)
    return ItemCreated(
        item=ItemResponse.model_validate(item),
        items=[ItemResponse.model_validate(i) for i in items],
    )


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: int,
    store: RecordStore = Depends(get_record_store)
):
    item = await item_service.get_item(store, item_id)
    if not item:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return ItemResponse.model_validate(item)


@router.get("/{item_id}/edit", response_model=ItemEditForm)
async def get_item_edit_form(
    item_id: int,
    store: RecordStore = Depends(get_record_store)
):
    """Values to preload into the edit form (unknown categories come back empty)"""
    item = await item_service.get_item(store, item_id)
    if not item:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return item_service.edit_form(item)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: int,
    name: str = Form(...),
    category: str = Form(...),
    category_other: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    store: RecordStore = Depends(get_record_store),
    uploader: MediaUploader = Depends(get_item_uploader)
):
    """Save the edit form; a new file replaces the photo"""
    form = _build_form(name, category, category_other, brand)
    image = await read_upload(file)

    item = await item_service.update_item(store, item_id, form, uploader, image)
    if not item:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return ItemResponse.model_validate(item)


@router.put("/{item_id}/image", response_model=ItemResponse)
async def replace_item_image(
    item_id: int,
    file: UploadFile = File(...),
    store: RecordStore = Depends(get_record_store),
    uploader: MediaUploader = Depends(get_item_uploader)
):
    """Replace only the photo"""
    image = await read_upload(file)
    if image is None:
        raise HTTPException(status_code=400, detail="No file provided")

    item = await item_service.replace_item_image(store, item_id, uploader, image)
    if not item:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return ItemResponse.model_validate(item)


@router.delete("/{item_id}", response_model=ItemDeleted)
async def delete_item(
    item_id: int,
    store: RecordStore = Depends(get_record_store)
):
    """Delete an item; an unknown id also reports success"""
    await item_service.delete_item(store, item_id)
    return ItemDeleted(message="Item deleted successfully", id=item_id)
