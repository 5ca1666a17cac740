from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from ducki.api.deps import get_current_user, get_record_store, get_avatar_uploader, read_upload
from ducki.core.media_upload import MediaUploader
from ducki.models.user import User
from ducki.services.profile_service import profile_service
from ducki.services.record_store import RecordStore
from ducki.schemas.profile import ProfileResponse
from typing import Optional

router = APIRouter()


def _response(profile, user: User) -> ProfileResponse:
    response = ProfileResponse.model_validate(profile)
    response.email = user.email
    return response


@router.get("/", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Get current user's profile"""
    profile = await profile_service.get_profile(store)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _response(profile, current_user)


@router.put("/", response_model=ProfileResponse)
async def save_profile(
    full_name: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
    uploader: MediaUploader = Depends(get_avatar_uploader)
):
    """Save display name and optionally upload a new avatar"""
    avatar_file = await read_upload(avatar)
    profile = await profile_service.save_profile(store, full_name, uploader, avatar_file)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _response(profile, current_user)
