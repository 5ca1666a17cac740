"""
Profile service - display name and avatar
"""
from typing import Optional
from ducki.models.user import Profile
from ducki.core.exceptions import MediaUploadError
from ducki.core.media_upload import MediaFile, MediaUploader
from ducki.services.record_store import RecordStore
import logging

logger = logging.getLogger(__name__)


class ProfileService:

    @staticmethod
    async def get_profile(store: RecordStore) -> Optional[Profile]:
        return await store.get(Profile)

    @staticmethod
    async def save_profile(
        store: RecordStore,
        full_name: Optional[str],
        uploader: MediaUploader,
        avatar: Optional[MediaFile] = None
    ) -> Optional[Profile]:
        """
        Save display name and optionally a new avatar

        The avatar is uploaded first; without a new file the current avatar is kept.

        Returns:
            Updated profile or None if the caller has no profile row

        Raises:
            MediaUploadError: avatar upload failed, nothing was saved
        """
        patch = {"full_name": full_name or None}
        if avatar is not None:
            try:
                uploaded = await uploader.upload(avatar)
            except MediaUploadError as e:
                raise MediaUploadError("Avatar upload failed") from e
            patch["avatar_url"] = uploaded.url

        rows = await store.update(Profile, patch)
        if not rows:
            return None

        logger.info(f"Profile saved for user {store.user_id}")
        return rows[0]


profile_service = ProfileService()
