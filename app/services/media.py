"""
Remote media store client (Cloudinary).

Uploads local files through the signed REST upload API and derives
transformed delivery URLs from stored objects without re-sending bytes.
Request signing and URL building come from the Cloudinary SDK; the upload
itself goes over ``httpx.AsyncClient``.
"""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import cloudinary.utils
import httpx

from app.config import settings
from app.core.errors import UpstreamServiceError
from app.core.logging import get_logger

logger = get_logger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


@dataclass(frozen=True)
class UploadedMedia:
    """Result of a successful upload."""

    public_url: str
    object_id: str
    version: int | None = None


@dataclass(frozen=True)
class AvatarTransformation:
    """
    Square, face-centred crop with rounded corners and a border.

    Rendered by the SDK as ``ar_1.0,c_fill,g_face,h_300,w_300/r_max/bo_2px_solid_white``.
    """

    width: int = 300
    height: int = 300
    aspect_ratio: str = "1.0"
    crop: str = "fill"
    gravity: str = "face"
    radius: str = "max"
    border: str | None = "2px_solid_white"

    def to_cloudinary(self) -> list[dict[str, Any]]:
        """Chained transformation in the SDK's ``transformation=[...]`` form."""
        chain: list[dict[str, Any]] = [
            {
                "aspect_ratio": self.aspect_ratio,
                "crop": self.crop,
                "gravity": self.gravity,
                "height": self.height,
                "width": self.width,
            },
            {"radius": self.radius},
        ]
        if self.border:
            chain.append({"border": self.border})
        return chain


def avatar_transformation() -> AvatarTransformation:
    """Avatar transformation built from settings."""
    return AvatarTransformation(
        width=settings.AVATAR_SIZE,
        height=settings.AVATAR_SIZE,
        border=settings.AVATAR_BORDER or None,
    )


def delivery_url(
    cloud_name: str | None,
    media: UploadedMedia,
    transformation: AvatarTransformation | None = None,
) -> str:
    """
    HTTPS delivery URL of an uploaded object.

    The upload version is part of the URL, so an overwritten object gets a
    new address and cached copies of the previous one are not served.
    """
    options: dict[str, Any] = {"cloud_name": cloud_name, "secure": True}
    if media.version is not None:
        options["version"] = media.version
    if transformation is not None:
        options["transformation"] = transformation.to_cloudinary()
    url, _ = cloudinary.utils.cloudinary_url(media.object_id, **options)
    return url


class MediaStore(Protocol):
    """Remote media store used by the avatar pipeline."""

    async def upload(
        self, path: Path, *, namespace: str, object_id: str | None = None
    ) -> UploadedMedia: ...

    def build_transformed_url(
        self, media: UploadedMedia, transformation: AvatarTransformation
    ) -> str: ...


class CloudinaryMediaStore:
    """MediaStore implementation talking to Cloudinary over HTTPS."""

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "CloudinaryMediaStore":
        return cls(
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
            timeout=settings.MEDIA_TIMEOUT_SECONDS,
        )

    @property
    def upload_url(self) -> str:
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/image/upload"

    async def upload(
        self, path: Path, *, namespace: str, object_id: str | None = None
    ) -> UploadedMedia:
        """
        Upload a local file under ``namespace``.

        With ``object_id`` the upload overwrites any previous object at
        ``namespace/object_id``; without it Cloudinary assigns a new id.

        Raises:
            UpstreamServiceError: if the store is not configured, the file
                cannot be read, or Cloudinary rejects the upload
        """
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise UpstreamServiceError("Media storage is not configured")

        params = {"folder": namespace, "timestamp": str(int(time.time()))}
        if object_id is not None:
            params.update({"public_id": object_id, "overwrite": "true", "invalidate": "true"})

        signature = cloudinary.utils.api_sign_request(params, self.api_secret)
        form = dict(params, api_key=self.api_key, signature=signature)

        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise UpstreamServiceError("Failed to read uploaded file") from e

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.upload_url,
                    data=form,
                    files={"file": (path.name, content)},
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "media_upload_rejected",
                namespace=namespace,
                object_id=object_id,
                status_code=e.response.status_code,
                error=e.response.text[:500],
            )
            raise UpstreamServiceError("Failed to upload image") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "media_upload_failed",
                namespace=namespace,
                object_id=object_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamServiceError("Failed to upload image") from e

        public_url = result.get("secure_url") or result.get("url")
        public_id = result.get("public_id")
        if not public_url or not public_id:
            logger.error("media_upload_malformed_response", keys=sorted(result))
            raise UpstreamServiceError("Unexpected response from media storage")

        logger.info("media_uploaded", public_id=public_id, bytes=len(content))
        return UploadedMedia(
            public_url=public_url,
            object_id=public_id,
            version=result.get("version"),
        )

    def build_transformed_url(
        self, media: UploadedMedia, transformation: AvatarTransformation
    ) -> str:
        return delivery_url(self.cloud_name, media, transformation)
