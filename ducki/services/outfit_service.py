"""
Outfit service - outfits, their media gallery and item membership
"""
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
from ducki.models.item import Item
from ducki.models.outfit import Outfit, OutfitMedia, OutfitItem, MediaType
from ducki.core.datetime_utils import parse_timestamp
from ducki.core.exceptions import RecordStoreError
from ducki.core.media_upload import MediaFile, MediaUploader, still_image_url
from ducki.services.item_service import ItemService, NEWEST_FIRST
from ducki.services.record_store import RecordStore
import logging

logger = logging.getLogger(__name__)

GALLERY_ORDER = [("position", "asc"), ("created_at", "asc"), ("id", "asc")]


class MembershipSet:
    """Ids of the items in one outfit, loaded once and kept in step with add/remove"""

    def __init__(self, item_ids: Iterable[int] = ()):
        self._ids: Set[int] = set(item_ids)

    @classmethod
    def from_rows(cls, rows: Iterable[OutfitItem]) -> "MembershipSet":
        return cls(row.item_id for row in rows)

    def add(self, item_id: int) -> None:
        self._ids.add(item_id)

    def discard(self, item_id: int) -> None:
        self._ids.discard(item_id)

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def ids(self) -> List[int]:
        return sorted(self._ids)

    def members(self, items: Iterable[Any]) -> List[Any]:
        """Items in the outfit, in the order given"""
        return [item for item in items if item.id in self._ids]

    def available(self, items: Iterable[Any]) -> List[Any]:
        """Items not yet in the outfit, in the order given"""
        return [item for item in items if item.id not in self._ids]


def media_type_for(media: MediaFile, resource_type: Optional[str]) -> MediaType:
    """Video when the file declares a video type or the host stored it as video"""
    if resource_type == "video" or media.is_video:
        return MediaType.VIDEO
    return MediaType.IMAGE


def _gallery_key(media: Any) -> Tuple[int, float]:
    created = parse_timestamp(media.created_at)
    return media.position, created if created is not None else float("inf")


def first_media(media: Iterable[Any]) -> Optional[Any]:
    """Lowest position wins; ties go to the earliest created"""
    media = list(media)
    if not media:
        return None
    return min(media, key=_gallery_key)


def media_thumbnail(url: str, media_type: Any) -> Optional[str]:
    """Static image URL for a gallery entry (video -> first frame)"""
    if MediaType(media_type) == MediaType.IMAGE:
        return url
    return still_image_url(url)


def derive_thumbnail(outfit: Any, media: Iterable[Any]) -> Tuple[Optional[str], Optional[MediaType]]:
    """
    Thumbnail for an outfit list entry

    Priority:
    1) legacy cover_image_url
    2) first gallery media (videos rewritten to a still frame)
    3) none

    Returns:
        Tuple of (thumb_url, thumb_type)
    """
    if outfit.cover_image_url:
        return outfit.cover_image_url, MediaType.IMAGE

    first = first_media(media)
    if first is not None:
        media_type = MediaType(first.media_type)
        return media_thumbnail(first.media_url, media_type), media_type

    return None, None


class OutfitService:
    """Outfit service for composing outfits from closet items"""

    @staticmethod
    async def list_outfits(store: RecordStore) -> List[Dict[str, Any]]:
        """
        Get the caller's outfits, newest first, each with a thumbnail

        Returns:
            List of dicts with the outfit columns plus thumb_url and thumb_type
        """
        outfits = await store.select(Outfit, order_by=NEWEST_FIRST)

        media_by_outfit: Dict[int, List[OutfitMedia]] = {}
        if outfits:
            try:
                media_rows = await store.select(
                    OutfitMedia,
                    filters={"outfit_id": [outfit.id for outfit in outfits]},
                    order_by=GALLERY_ORDER,
                )
            except RecordStoreError as e:
                # Outfits still show without media thumbnails
                logger.warning(f"Outfit media lookup failed for user {store.user_id}: {e}")
                media_rows = []
            for row in media_rows:
                media_by_outfit.setdefault(row.outfit_id, []).append(row)

        summaries = []
        for outfit in outfits:
            thumb_url, thumb_type = derive_thumbnail(outfit, media_by_outfit.get(outfit.id, []))
            summaries.append({
                "id": outfit.id,
                "user_id": outfit.user_id,
                "name": outfit.name,
                "cover_image_url": outfit.cover_image_url,
                "created_at": outfit.created_at,
                "thumb_url": thumb_url,
                "thumb_type": thumb_type,
            })
        return summaries

    @staticmethod
    async def get_outfit(store: RecordStore, outfit_id: int) -> Optional[Outfit]:
        """Get outfit by ID, None when missing or owned by another user"""
        return await store.get(Outfit, id=outfit_id)

    @staticmethod
    async def create_outfit(store: RecordStore, name: str) -> Outfit:
        outfit = await store.insert(Outfit, name=name)
        logger.info(f"Outfit created: {outfit.id} for user {store.user_id}")
        return outfit

    @staticmethod
    async def list_media(store: RecordStore, outfit_id: int) -> List[OutfitMedia]:
        """Gallery in display order: position, then creation time"""
        return await store.select(OutfitMedia, filters={"outfit_id": outfit_id}, order_by=GALLERY_ORDER)

    @staticmethod
    async def get_membership(store: RecordStore, outfit_id: int) -> MembershipSet:
        rows = await store.select(OutfitItem, filters={"outfit_id": outfit_id})
        return MembershipSet.from_rows(rows)

    @staticmethod
    async def get_outfit_detail(store: RecordStore, outfit_id: int) -> Optional[Dict[str, Any]]:
        """
        Everything the outfit page shows

        Returns:
            Dict with outfit, cover_image_url, media, items, available_items,
            item_ids; None if the outfit is not found
        """
        outfit = await OutfitService.get_outfit(store, outfit_id)
        if not outfit:
            return None

        all_items = await ItemService.list_items(store)
        membership = await OutfitService.get_membership(store, outfit_id)
        media = await OutfitService.list_media(store, outfit_id)

        cover = outfit.cover_image_url
        if not cover and media:
            cover = media[0].media_url

        return {
            "outfit": outfit,
            "cover_image_url": cover,
            "media": media,
            "items": membership.members(all_items),
            "available_items": membership.available(all_items),
            "item_ids": membership.ids(),
        }

    @staticmethod
    async def attach_media(
        store: RecordStore,
        outfit_id: int,
        uploader: MediaUploader,
        media: MediaFile
    ) -> Optional[OutfitMedia]:
        """
        Upload a photo or video and append it to the outfit gallery

        The new entry gets position = current media count. The first media
        also seeds the legacy cover image when the outfit has none.

        Returns:
            Created media row or None if the outfit is not found

        Raises:
            MediaUploadError: upload failed, nothing was inserted
        """
        outfit = await OutfitService.get_outfit(store, outfit_id)
        if not outfit:
            return None

        uploaded = await uploader.upload(media, resource="auto")
        media_type = media_type_for(media, uploaded.resource_type)
        position = await store.count(OutfitMedia, outfit_id=outfit_id)

        row = await store.insert(
            OutfitMedia,
            outfit_id=outfit_id,
            media_url=uploaded.url,
            media_type=media_type,
            position=position,
        )
        logger.info(f"Media {row.id} ({media_type.value}) attached to outfit {outfit_id} at position {position}")

        if not outfit.cover_image_url:
            cover = media_thumbnail(uploaded.url, media_type)
            if cover:
                await store.update(Outfit, {"cover_image_url": cover}, id=outfit_id)

        return row

    @staticmethod
    async def add_item(store: RecordStore, outfit_id: int, item_id: int) -> Optional[MembershipSet]:
        """
        Put one closet item into an outfit

        Returns:
            Updated membership or None if the outfit or item is not found

        Raises:
            RecordStoreError: the item is already in the outfit
        """
        outfit = await OutfitService.get_outfit(store, outfit_id)
        item = await ItemService.get_item(store, item_id)
        if not outfit or not item:
            return None

        membership = await OutfitService.get_membership(store, outfit_id)
        await store.insert(OutfitItem, outfit_id=outfit_id, item_id=item_id)
        membership.add(item_id)

        logger.info(f"Item {item_id} added to outfit {outfit_id}")
        return membership

    @staticmethod
    async def remove_item(store: RecordStore, outfit_id: int, item_id: int) -> Optional[MembershipSet]:
        """
        Take one item out of an outfit

        Returns:
            Updated membership or None if the outfit is not found
        """
        outfit = await OutfitService.get_outfit(store, outfit_id)
        if not outfit:
            return None

        membership = await OutfitService.get_membership(store, outfit_id)
        await store.delete(OutfitItem, outfit_id=outfit_id, item_id=item_id)
        membership.discard(item_id)

        logger.info(f"Item {item_id} removed from outfit {outfit_id}")
        return membership

    @staticmethod
    async def get_outfit_item(store: RecordStore, outfit_id: int, item_id: int) -> Tuple[Optional[Item], Optional[str]]:
        """
        Item as seen from inside an outfit

        Returns:
            Tuple of (item, error message); the item is returned only when it
            is the caller's and belongs to the outfit
        """
        item = await ItemService.get_item(store, item_id)
        if not item:
            return None, "Item not found (or you do not have access)."

        membership = await store.get(OutfitItem, outfit_id=outfit_id, item_id=item_id)
        if not membership:
            return None, "This item is not in that outfit."

        return item, None

    @staticmethod
    async def delete_outfit(store: RecordStore, outfit_id: int) -> bool:
        """
        Delete an outfit with its membership rows and gallery in one transaction

        Returns:
            True if deleted, False if not found
        """
        async with store.transaction():
            if not await store.count(Outfit, id=outfit_id):
                return False
            removed_items = await store.delete(OutfitItem, outfit_id=outfit_id)
            removed_media = await store.delete(OutfitMedia, outfit_id=outfit_id)
            await store.delete(Outfit, id=outfit_id)

        logger.info(
            f"Outfit {outfit_id} deleted by user {store.user_id} "
            f"({removed_items} item link(s), {removed_media} media)"
        )
        return True


# Export singleton instance
outfit_service = OutfitService()
