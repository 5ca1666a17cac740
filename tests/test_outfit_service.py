"""
Tests for outfits, their gallery and item membership
"""
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from conftest import image_file, video_file
from ducki.core.exceptions import MediaUploadError, RecordStoreError
from ducki.models.item import Item
from ducki.models.outfit import MediaType, Outfit, OutfitItem, OutfitMedia
from ducki.services.outfit_service import (
    MembershipSet,
    derive_thumbnail,
    first_media,
    outfit_service,
)


def media(position, url, media_type="image", minute=0):
    return SimpleNamespace(
        position=position,
        media_url=url,
        media_type=media_type,
        created_at=datetime(2026, 1, 1, 0, minute, tzinfo=timezone.utc),
    )


class TestMembershipSet:

    def test_tracks_adds_and_removes(self):
        membership = MembershipSet([3, 1])
        membership.add(2)
        membership.discard(3)
        membership.discard(42)
        assert membership.ids() == [1, 2]
        assert 2 in membership and 3 not in membership
        assert len(membership) == 2

    def test_partitions_items_in_given_order(self):
        items = [SimpleNamespace(id=i) for i in (5, 4, 3)]
        membership = MembershipSet([4])
        assert [i.id for i in membership.members(items)] == [4]
        assert [i.id for i in membership.available(items)] == [5, 3]


class TestThumbnails:

    def test_cover_wins(self):
        outfit = SimpleNamespace(cover_image_url="https://cdn/cover.jpg")
        assert derive_thumbnail(outfit, [media(0, "https://cdn/a.jpg")]) == ("https://cdn/cover.jpg", MediaType.IMAGE)

    def test_first_image(self):
        outfit = SimpleNamespace(cover_image_url=None)
        gallery = [media(1, "https://cdn/b.jpg"), media(0, "https://cdn/a.jpg")]
        assert derive_thumbnail(outfit, gallery) == ("https://cdn/a.jpg", MediaType.IMAGE)

    def test_first_video_becomes_still(self):
        outfit = SimpleNamespace(cover_image_url=None)
        gallery = [media(0, "https://res.cloudinary.com/demo/video/upload/v1/clip.mp4", "video")]
        assert derive_thumbnail(outfit, gallery) == (
            "https://res.cloudinary.com/demo/video/upload/so_0/v1/clip.jpg",
            MediaType.VIDEO,
        )

    def test_no_media(self):
        assert derive_thumbnail(SimpleNamespace(cover_image_url=None), []) == (None, None)

    def test_position_tie_goes_to_earliest(self):
        gallery = [media(0, "later", minute=5), media(0, "earlier", minute=1)]
        assert first_media(gallery).media_url == "earlier"


class TestAttachMedia:

    async def test_positions_follow_upload_order(self, store, uploader):
        outfit = await outfit_service.create_outfit(store, "Date night")
        for name in ("a.jpg", "b.jpg", "c.jpg"):
            await outfit_service.attach_media(store, outfit.id, uploader, image_file(name))

        gallery = await outfit_service.list_media(store, outfit.id)
        assert [m.position for m in gallery] == [0, 1, 2]
        assert [m.media_url.rsplit("_", 1)[1] for m in gallery] == ["a.jpg", "b.jpg", "c.jpg"]
        assert all(resource == "auto" for _, resource in uploader.uploads)

    async def test_video_is_classified(self, store, uploader):
        outfit = await outfit_service.create_outfit(store, "Gym")
        row = await outfit_service.attach_media(store, outfit.id, uploader, video_file())
        assert row.media_type == MediaType.VIDEO

    async def test_first_image_seeds_cover(self, store, uploader):
        outfit = await outfit_service.create_outfit(store, "Date night")
        first = await outfit_service.attach_media(store, outfit.id, uploader, image_file("a.jpg"))
        await outfit_service.attach_media(store, outfit.id, uploader, image_file("b.jpg"))

        refreshed = await outfit_service.get_outfit(store, outfit.id)
        assert refreshed.cover_image_url == first.media_url

    async def test_first_video_seeds_still_cover(self, store, uploader):
        outfit = await outfit_service.create_outfit(store, "Gym")
        await outfit_service.attach_media(store, outfit.id, uploader, video_file("clip.mp4"))

        refreshed = await outfit_service.get_outfit(store, outfit.id)
        assert refreshed.cover_image_url == "https://res.cloudinary.com/demo/video/upload/so_0/v1/1_clip.jpg"

    async def test_failed_upload_inserts_nothing(self, store, failing_uploader):
        outfit = await outfit_service.create_outfit(store, "Date night")
        with pytest.raises(MediaUploadError):
            await outfit_service.attach_media(store, outfit.id, failing_uploader, image_file())
        assert await store.count(OutfitMedia) == 0

    async def test_other_users_outfit(self, store, other_store, uploader):
        outfit = await outfit_service.create_outfit(other_store, "Theirs")
        assert await outfit_service.attach_media(store, outfit.id, uploader, image_file()) is None
        assert uploader.uploads == []


class TestListOutfits:

    async def test_newest_first_with_thumbnails(self, store, uploader):
        plain = await outfit_service.create_outfit(store, "Plain")
        with_media = await outfit_service.create_outfit(store, "With media")
        await outfit_service.attach_media(store, with_media.id, uploader, image_file())

        summaries = await outfit_service.list_outfits(store)

        assert [s["id"] for s in summaries] == [with_media.id, plain.id]
        assert summaries[0]["thumb_url"].endswith("1_photo.jpg")
        assert summaries[0]["thumb_type"] == MediaType.IMAGE
        assert summaries[1]["thumb_url"] is None
        assert summaries[1]["thumb_type"] is None

    async def test_empty(self, store):
        assert await outfit_service.list_outfits(store) == []

    async def test_media_lookup_failure_still_lists_outfits(self, store, uploader):
        legacy = await store.insert(Outfit, name="Legacy")
        await store.insert(
            OutfitMedia, outfit_id=legacy.id, media_url="https://cdn/a.jpg",
            media_type=MediaType.IMAGE, position=0,
        )
        covered = await outfit_service.create_outfit(store, "Covered")
        await outfit_service.attach_media(store, covered.id, uploader, image_file())

        execute = store.db.execute

        async def execute_without_media(statement, *args, **kwargs):
            if "outfit_media" in str(statement):
                raise OperationalError(str(statement), {}, Exception("no such table: outfit_media"))
            return await execute(statement, *args, **kwargs)

        with patch.object(store.db, "execute", execute_without_media):
            summaries = await outfit_service.list_outfits(store)

        by_name = {s["name"]: s for s in summaries}
        assert set(by_name) == {"Legacy", "Covered"}
        assert by_name["Legacy"]["thumb_url"] is None
        assert by_name["Legacy"]["thumb_type"] is None
        assert by_name["Covered"]["thumb_url"].endswith("1_photo.jpg")


class TestMembership:

    async def test_date_night_with_black_jeans(self, store):
        outfit = await outfit_service.create_outfit(store, "Date night")
        jeans = await store.insert(Item, name="Black Jeans", category="Jeans")
        shirt = await store.insert(Item, name="Linen Shirt", category="Tops")

        membership = await outfit_service.add_item(store, outfit.id, jeans.id)
        assert membership.ids() == [jeans.id]

        detail = await outfit_service.get_outfit_detail(store, outfit.id)
        assert [i.name for i in detail["items"]] == ["Black Jeans"]
        assert [i.name for i in detail["available_items"]] == ["Linen Shirt"]
        assert detail["item_ids"] == [jeans.id]

        membership = await outfit_service.remove_item(store, outfit.id, jeans.id)
        assert membership.ids() == []
        assert shirt.id not in membership

    async def test_adding_twice_is_store_error(self, store):
        outfit = await outfit_service.create_outfit(store, "Date night")
        jeans = await store.insert(Item, name="Black Jeans", category="Jeans")
        await outfit_service.add_item(store, outfit.id, jeans.id)

        with pytest.raises(RecordStoreError):
            await outfit_service.add_item(store, outfit.id, jeans.id)

    async def test_missing_item_or_outfit(self, store, other_store):
        outfit = await outfit_service.create_outfit(store, "Date night")
        foreign = await other_store.insert(Item, name="Theirs", category="Tops")

        assert await outfit_service.add_item(store, outfit.id, foreign.id) is None
        assert await outfit_service.add_item(store, 9999, foreign.id) is None
        assert await outfit_service.remove_item(store, 9999, foreign.id) is None

    async def test_get_outfit_item_errors(self, store):
        outfit = await outfit_service.create_outfit(store, "Date night")
        jeans = await store.insert(Item, name="Black Jeans", category="Jeans")

        assert await outfit_service.get_outfit_item(store, outfit.id, 9999) == (
            None, "Item not found (or you do not have access)."
        )
        assert await outfit_service.get_outfit_item(store, outfit.id, jeans.id) == (
            None, "This item is not in that outfit."
        )

        await outfit_service.add_item(store, outfit.id, jeans.id)
        item, error = await outfit_service.get_outfit_item(store, outfit.id, jeans.id)
        assert item.id == jeans.id and error is None


class TestOutfitDetail:

    async def test_cover_falls_back_to_first_media(self, store, uploader):
        outfit = await store.insert(Outfit, name="Legacy")
        await store.insert(
            OutfitMedia, outfit_id=outfit.id, media_url="https://cdn/a.jpg",
            media_type=MediaType.IMAGE, position=0,
        )

        detail = await outfit_service.get_outfit_detail(store, outfit.id)
        assert detail["outfit"].cover_image_url is None
        assert detail["cover_image_url"] == "https://cdn/a.jpg"

    async def test_missing(self, store):
        assert await outfit_service.get_outfit_detail(store, 9999) is None


class TestDeleteOutfit:

    async def test_removes_links_and_media_not_items(self, store, uploader):
        outfit = await outfit_service.create_outfit(store, "Date night")
        jeans = await store.insert(Item, name="Black Jeans", category="Jeans")
        await outfit_service.add_item(store, outfit.id, jeans.id)
        await outfit_service.attach_media(store, outfit.id, uploader, image_file())

        assert await outfit_service.delete_outfit(store, outfit.id) is True

        assert await store.count(Outfit) == 0
        assert await store.count(OutfitMedia) == 0
        assert await store.count(OutfitItem) == 0
        assert await store.count(Item) == 1

    async def test_missing_outfit(self, store, other_store):
        outfit = await outfit_service.create_outfit(other_store, "Theirs")
        assert await outfit_service.delete_outfit(store, outfit.id) is False
        assert await outfit_service.delete_outfit(store, 9999) is False
        assert await other_store.count(Outfit) == 1
