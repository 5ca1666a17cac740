"""
Media host (Cloudinary) upload client and URL helpers
"""
from typing import NamedTuple, Optional
import re
import logging
import httpx
from ducki.config import MediaHostConfig
from ducki.core.exceptions import MediaUploadError

logger = logging.getLogger(__name__)

VIDEO_UPLOAD_SEGMENT = "/video/upload/"
FIRST_FRAME_SEGMENT = "/video/upload/so_0/"
_VIDEO_EXTENSION = re.compile(r"\.(mp4|mov|webm|m4v)(\?.*)?$", re.IGNORECASE)


class MediaFile(NamedTuple):
    """File received from a client, ready to be sent to the media host"""
    content: bytes
    filename: str
    content_type: str = "application/octet-stream"

    @property
    def is_video(self) -> bool:
        return (self.content_type or "").startswith("video/")


class UploadResult(NamedTuple):
    url: str
    resource_type: Optional[str] = None


class MediaUploader:
    """Uploads files to one media host account/preset"""

    def __init__(self, config: MediaHostConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    async def upload(self, media: MediaFile, resource: str = "image") -> UploadResult:
        """
        Upload a file and return its public URL

        Args:
            media: File content and metadata
            resource: Host resource path: "image", "video" or "auto"

        Returns:
            UploadResult with the secure URL and the host's resource type

        Raises:
            MediaUploadError: transport failure or no secure_url in the response
        """
        data = {"upload_preset": self.config.upload_preset}
        if self.config.folder:
            data["folder"] = self.config.folder
        files = {"file": (media.filename, media.content, media.content_type)}

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                response = await client.post(self.config.upload_url(resource), data=data, files=files)
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Media upload failed for {media.filename}: {e}")
            raise MediaUploadError() from e

        secure_url = body.get("secure_url") if isinstance(body, dict) else None
        if response.status_code >= 400 or not secure_url:
            logger.error(f"Media host rejected {media.filename}: status={response.status_code} body={body}")
            raise MediaUploadError()

        logger.info(f"Uploaded {media.filename} to {secure_url}")
        return UploadResult(url=secure_url, resource_type=body.get("resource_type"))


def still_image_url(url: str) -> Optional[str]:
    """
    First-frame JPEG for a host video URL

    https://res.cloudinary.com/<cloud>/video/upload/<id>.mp4
    -> https://res.cloudinary.com/<cloud>/video/upload/so_0/<id>.jpg

    Returns None when the URL is not a host video URL.
    """
    if VIDEO_UPLOAD_SEGMENT not in url:
        return None
    rewritten = url.replace(VIDEO_UPLOAD_SEGMENT, FIRST_FRAME_SEGMENT, 1)
    return _VIDEO_EXTENSION.sub(lambda m: ".jpg" + (m.group(2) or ""), rewritten)
