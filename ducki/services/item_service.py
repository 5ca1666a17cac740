"""
Item service - Business logic for a user's closet
"""
from typing import List, Optional, Tuple
from ducki.models.item import Item
from ducki.models.outfit import OutfitItem
from ducki.schemas.item import ItemForm, ItemEditForm
from ducki.core.categories import edit_category
from ducki.core.media_upload import MediaFile, MediaUploader
from ducki.services.record_store import RecordStore
import logging

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", "desc"), ("id", "desc")]


class ItemService:
    """Item service for managing the clothing items in a user's closet"""

    @staticmethod
    async def list_items(store: RecordStore) -> List[Item]:
        """Get all of the caller's items, newest first (no pagination)"""
        return await store.select(Item, order_by=NEWEST_FIRST)

    @staticmethod
    async def get_item(store: RecordStore, item_id: int) -> Optional[Item]:
        """Get item by ID, None when missing or owned by another user"""
        return await store.get(Item, id=item_id)

    @staticmethod
    def edit_form(item: Item) -> ItemEditForm:
        """Values for the edit form; a category outside the options shows as no selection"""
        return ItemEditForm(
            id=item.id,
            name=item.name,
            category=edit_category(item.category),
            brand=item.brand or "",
            image_url=item.image_url,
        )

    @staticmethod
    async def create_item(
        store: RecordStore,
        form: ItemForm,
        uploader: MediaUploader,
        image: Optional[MediaFile] = None
    ) -> Tuple[Item, List[Item]]:
        """
        Create an item, uploading its photo first

        Args:
            store: Caller-scoped record store
            form: Item fields
            uploader: Media host client
            image: Optional photo

        Returns:
            Tuple of (created item, full closet re-fetched after the insert)

        Raises:
            MediaUploadError: upload failed, nothing was inserted
        """
        image_url = None
        if image is not None:
            uploaded = await uploader.upload(image)
            image_url = uploaded.url

        item = await store.insert(Item, image_url=image_url, **form.to_row())
        logger.info(f"Item created: {item.id} for user {store.user_id}")

        items = await ItemService.list_items(store)
        return item, items

    @staticmethod
    async def update_item(
        store: RecordStore,
        item_id: int,
        form: ItemForm,
        uploader: MediaUploader,
        image: Optional[MediaFile] = None
    ) -> Optional[Item]:
        """
        Update every form field, replacing the photo when a new one is given

        Returns:
            Updated item or None if not found
        """
        patch = form.to_row()
        if image is not None:
            uploaded = await uploader.upload(image)
            patch["image_url"] = uploaded.url

        rows = await store.update(Item, patch, id=item_id)
        if not rows:
            return None

        logger.info(f"Item {item_id} updated by user {store.user_id}")
        return rows[0]

    @staticmethod
    async def replace_item_image(
        store: RecordStore,
        item_id: int,
        uploader: MediaUploader,
        image: MediaFile
    ) -> Optional[Item]:
        """Upload a new photo and patch only image_url"""
        uploaded = await uploader.upload(image)
        rows = await store.update(Item, {"image_url": uploaded.url}, id=item_id)
        if not rows:
            return None

        logger.info(f"Item {item_id} image replaced by user {store.user_id}")
        return rows[0]

    @staticmethod
    async def delete_item(store: RecordStore, item_id: int) -> int:
        """
        Delete item unconditionally

        Returns:
            Rows removed; 0 when the id is unknown or not the caller's
        """
        async with store.transaction():
            if await store.count(Item, id=item_id):
                await store.delete(OutfitItem, item_id=item_id)
            deleted = await store.delete(Item, id=item_id)

        logger.info(f"Item {item_id} delete by user {store.user_id}: {deleted} row(s)")
        return deleted


# Export singleton instance
item_service = ItemService()
